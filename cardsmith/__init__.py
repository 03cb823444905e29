"""cardsmith: turn selected text into flashcards and discussion questions with Claude."""

__version__ = "1.0.0"
