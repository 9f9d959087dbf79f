import asyncio

from liquidtrack.services.advice import AdviceService, build_prompt
from tests.conftest import FakeAdviceClient


def test_generate_returns_trimmed_answer() -> None:
    client = FakeAdviceClient(answer="  Call the port agent.\n")
    service = AdviceService(client)

    advice = asyncio.run(service.generate("Delay", "Held at port", "en"))

    assert advice == "Call the port agent."


def test_prompt_requests_answer_language() -> None:
    client = FakeAdviceClient()
    service = AdviceService(client)

    asyncio.run(service.generate("Задержка", "Контейнер на таможне", "ru"))

    [prompt] = client.prompts
    assert "IMPORTANT: Answer in RUSSIAN language." in prompt
    assert "Issue Title: Задержка" in prompt
    assert "Issue Description: Контейнер на таможне" in prompt


def test_build_prompt_english() -> None:
    prompt = build_prompt("Delay", "Held at port", "en")

    assert prompt.startswith("You are a logistics and supply chain expert")
    assert "Answer in ENGLISH language." in prompt


def test_missing_client_returns_localized_fallback() -> None:
    service = AdviceService(None)

    assert (
        asyncio.run(service.generate("Delay", "Held", "en"))
        == "API Key configuration required."
    )
    assert (
        asyncio.run(service.generate("Delay", "Held", "ru"))
        == "Требуется настройка ключа API."
    )


def test_client_failure_returns_unavailable_text() -> None:
    service = AdviceService(FakeAdviceClient(error=True))

    assert (
        asyncio.run(service.generate("Delay", "Held", "en"))
        == "AI Service unavailable at the moment."
    )
    assert (
        asyncio.run(service.generate("Delay", "Held", "ru"))
        == "Сервис AI временно недоступен."
    )


def test_blank_answer_returns_empty_text() -> None:
    service = AdviceService(FakeAdviceClient(answer="   "))

    assert asyncio.run(service.generate("Delay", "Held", "en")) == "No analysis available."
    assert asyncio.run(service.generate("Delay", "Held", "ru")) == "Нет анализа."
