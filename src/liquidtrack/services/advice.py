"""Remediation advice generation using LLMs."""

import logging
from dataclasses import dataclass
from typing import Protocol

from liquidtrack.errors import AdviceError
from liquidtrack.i18n import Language, advice_name, text

_logger = logging.getLogger(__name__)


class AdviceClient(Protocol):
    """Interface for LLM text completion."""

    async def complete(self, prompt: str) -> str:
        """Return the model's text answer for a prompt."""


@dataclass
class AdviceService:
    """Builds advice prompts and turns every failure into content."""

    client: AdviceClient | None

    async def generate(self, title: str, description: str, language: Language) -> str:
        """Return a one-sentence action plan or a localized fallback."""
        if self.client is None:
            _logger.warning("OpenAI API key missing; returning fallback advice")
            return text(language, "advice.missing_key")
        try:
            answer = await self.client.complete(
                build_prompt(title, description, language)
            )
        except AdviceError as exc:
            _logger.warning("Advice generation failed: %s", exc)
            return text(language, "advice.unavailable")
        cleaned = answer.strip()
        return cleaned or text(language, "advice.empty")


def build_prompt(title: str, description: str, language: Language) -> str:
    """Build the advice prompt for an issue."""
    return (
        "You are a logistics and supply chain expert assistant.\n"
        "Analyze the following issue briefly and suggest a 1-sentence "
        "immediate action plan.\n\n"
        f"IMPORTANT: Answer in {advice_name(language)} language.\n"
        "Keep it professional and concise.\n\n"
        f"Issue Title: {title}\n"
        f"Issue Description: {description}"
    )
