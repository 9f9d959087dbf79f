"""OpenAI Responses API client for issue advice."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from liquidtrack.errors import AdviceError
from liquidtrack.services.advice import AdviceClient


@dataclass
class OpenAIAdviceClient(AdviceClient):
    """Advice client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAIAdviceClient":
        """Create an OpenAI advice client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def complete(self, prompt: str) -> str:
        """Call OpenAI Responses API and return the output text."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": prompt,
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise AdviceError(f"OpenAI request failed: {exc}") from exc
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
