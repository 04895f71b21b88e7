"""Conversation naming after the first exchange."""

import logging

from app.services.generation import TextGenerator


logger = logging.getLogger(__name__)

TITLE_PROMPT_TEMPLATE = """Based on this conversation, generate a short, descriptive title (2-4 words) for the chat:

User: {user_text}
Assistant: {assistant_text}

Generate a title that captures the main topic or intent. Examples:
- "hi" -> "Friendly Greeting"
- "help with JavaScript syntax" -> "JavaScript Help"
- "explain quantum physics" -> "Quantum Physics"
- "how to cook pasta" -> "Cooking Tips"
- "what's the weather" -> "Weather Query"

Title:"""

_QUOTE_CHARS = "\"'"


def fallback_name(text: str, length: int = 30) -> str:
    """Name a conversation after the first ``length`` characters of its opening message."""
    if len(text) > length:
        return text[:length] + "..."
    return text


def clean_title(raw: str, max_length: int = 50) -> str:
    """Strip surrounding whitespace and every quote character, then truncate."""
    title = raw.strip()
    for quote in _QUOTE_CHARS:
        title = title.replace(quote, "")
    return title.strip()[:max_length]


class NamingPolicy:
    """Derives a short display name for a conversation.

    The generator is asked for a title; any failure falls back to a name built
    from the user's first message, so ``derive_name`` never raises.
    """

    def __init__(self, generator: TextGenerator | None, max_length: int = 50, fallback_length: int = 30):
        self.generator = generator
        self.max_length = max_length
        self.fallback_length = fallback_length

    def build_prompt(self, user_text: str, assistant_text: str) -> str:
        return TITLE_PROMPT_TEMPLATE.format(user_text=user_text, assistant_text=assistant_text)

    async def derive_name(self, user_text: str, assistant_text: str) -> str:
        """Return a title for the exchange, or the fallback name on any failure."""
        if self.generator is None:
            return fallback_name(user_text, self.fallback_length)

        try:
            raw = await self.generator.generate(self.build_prompt(user_text, assistant_text))
        except Exception as e:
            logger.warning("Title generation failed, using fallback name: %s", str(e))
            return fallback_name(user_text, self.fallback_length)

        title = clean_title(raw or "", self.max_length)
        if not title:
            logger.warning("Title generation returned nothing usable, using fallback name")
            return fallback_name(user_text, self.fallback_length)
        return title
