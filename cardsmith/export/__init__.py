"""File exports: Anki TSV and Markdown."""

from cardsmith.export.anki_tsv import cards_to_tsv, export_filename, import_filename, parse_tsv
from cardsmith.export.markdown import cards_to_markdown, markdown_filename, questions_to_markdown

__all__ = [
    "cards_to_tsv",
    "parse_tsv",
    "export_filename",
    "import_filename",
    "cards_to_markdown",
    "questions_to_markdown",
    "markdown_filename",
]
