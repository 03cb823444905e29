"""
Prompts for Claude card and question generation.

Contains:
- CARDS system prompt - spaced repetition flashcards as a JSON array
- QUESTIONS system prompt - discussion questions as a JSON array
- ANALYSIS system prompt - short contextual summary of a document

User prompts are built by the factory functions at the bottom of the module.
"""
from __future__ import annotations

TRUNCATION_SUFFIX = "... [truncated]"

# =============================================================================
# System Prompts
# =============================================================================

CARDS_SYSTEM_PROMPT = """You are an expert in creating high-quality spaced repetition flashcards.
Your task is to generate effective flashcards from the highlighted text excerpt, with the full text provided for context.

Guidelines for creating excellent flashcards:
- Be EXTREMELY concise - answers should be 1-2 sentences maximum
- Focus on core concepts, relationships, and techniques rather than trivia or isolated facts
- Break complex ideas into smaller, atomic concepts
- Ensure each card tests one specific idea (atomic)
- Front of card should ask a specific question that prompts recall
- Back of card should provide the shortest possible complete answer
- Make each card standalone and self-contained. NEVER use phrases like "according to this text" or "in this selection" since the cards will be reviewed out of context months later
- When referencing the author or source, use their specific name rather than "the author" or "this text"
- Questions should be precise and unambiguously exclude alternative correct answers
- Avoid yes/no questions and unordered lists of many items
- If quantities are involved, they should be relative, or the unit should be given in the question

You will also analyze the content and suggest an appropriate deck category.
The deck options are provided in the user message.

CRITICAL: You MUST ALWAYS output your response as a valid JSON array of card objects. NEVER provide any prose, explanation or markdown formatting.

Each card object must have the following structure:

{
  "front": "The question or prompt text goes here",
  "back": "The answer or explanation text goes here",
  "deck": "One of the deck categories listed in the user message"
}

Generate between 1-5 cards depending on the complexity and amount of content in the highlighted text.
Your response MUST BE ONLY valid JSON - no introduction, no explanation, no markdown formatting."""

QUESTIONS_SYSTEM_PROMPT = """You are an expert discussion facilitator.
Your task is to write thought-provoking discussion questions about the highlighted text excerpt, with the full text provided for context.

Guidelines:
- Ask open-ended questions that invite analysis, comparison or critique
- Each question must stand on its own without referring to "this text" or "the passage"
- Prefer "why" and "how" questions over recall of isolated facts
- Group questions under a short topic label

CRITICAL: You MUST ALWAYS output your response as a valid JSON array of question objects. NEVER provide any prose, explanation or markdown formatting.

Each question object must have the following structure:

{
  "question": "The discussion question goes here",
  "topic": "A short topic label"
}

Generate between 2-5 questions.
Your response MUST BE ONLY valid JSON - no introduction, no explanation, no markdown formatting."""

ANALYSIS_SYSTEM_PROMPT = (
    "You analyze text to extract key contextual information. Create a concise 1-2 paragraph "
    "summary that includes: the author/source if identifiable, the main thesis or argument, "
    "key points, and relevant background. This summary will serve as context for future "
    "interactions with sections of this text."
)

# =============================================================================
# User Prompt Templates
# =============================================================================

CARDS_USER_TEMPLATE = """Please create spaced repetition flashcards from the SELECTED TEXT below.
Use the guidelines from the system prompt.

Available deck categories: {deck_options}

Remember to return ONLY a valid JSON array of flashcard objects matching the required format.

PRIMARY FOCUS - Selected Text (create cards from this):
{text}
{context_section}"""

QUESTIONS_USER_TEMPLATE = """Please write discussion questions about the SELECTED TEXT below.
Use the guidelines from the system prompt.

Remember to return ONLY a valid JSON array of question objects matching the required format.

PRIMARY FOCUS - Selected Text:
{text}
{context_section}"""

CONTEXT_SECTION_TEMPLATE = """
OPTIONAL BACKGROUND - Document Context (extract any relevant context from this to make your output standalone):
{context}"""

ANALYSIS_USER_TEMPLATE = (
    "Please analyze this text and provide a concise contextual summary "
    "(1-2 paragraphs maximum):\n\n{text}"
)


# =============================================================================
# Prompt Factory
# =============================================================================

def truncate_text(text: str | None, max_length: int = 8000) -> str:
    """Truncate text beyond max_length, marking the cut."""
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length] + TRUNCATION_SUFFIX


def _context_section(context: str | None, max_length: int) -> str:
    if not context:
        return ""
    return CONTEXT_SECTION_TEMPLATE.format(context=truncate_text(context, max_length))


def build_cards_prompt(
    text: str,
    deck_options: str = "",
    context: str = "",
    max_text_chars: int = 8000,
    max_context_chars: int = 1500,
) -> str:
    """
    Build the user prompt for flashcard generation.

    Args:
        text: Selected text to create cards from
        deck_options: Comma-separated deck names offered to the model
        context: Optional document summary used as background
        max_text_chars: Truncation limit for the selection
        max_context_chars: Truncation limit for the context

    Returns:
        Formatted prompt string
    """
    return CARDS_USER_TEMPLATE.format(
        deck_options=deck_options or "General",
        text=truncate_text(text, max_text_chars),
        context_section=_context_section(context, max_context_chars),
    )


def build_questions_prompt(
    text: str,
    context: str = "",
    max_text_chars: int = 8000,
    max_context_chars: int = 1500,
) -> str:
    """Build the user prompt for discussion question generation."""
    return QUESTIONS_USER_TEMPLATE.format(
        text=truncate_text(text, max_text_chars),
        context_section=_context_section(context, max_context_chars),
    )


def build_analysis_prompt(text: str, max_text_chars: int = 10000) -> str:
    """Build the user prompt for document analysis."""
    return ANALYSIS_USER_TEMPLATE.format(text=truncate_text(text, max_text_chars))
