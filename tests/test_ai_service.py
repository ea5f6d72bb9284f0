import asyncio
import json

import httpx
import pytest

from tripsmith.core.config import settings
from tripsmith.schemas.checklist_schema import ChecklistGenerateRequest
from tripsmith.services import ai_service


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def mock_client(*responses):
    """AsyncClient that answers each request with the next queued response."""
    queue = list(responses)
    requests = []

    def handler(request):
        requests.append(request)
        response = queue.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), requests


@pytest.fixture(autouse=True)
def gemini_settings(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(settings, "GEMINI_MODEL", "gemini-2.0-flash")
    monkeypatch.setattr(settings, "GENERATION_MAX_RETRIES", 3)
    monkeypatch.setattr(settings, "GENERATION_INITIAL_DELAY", 1.0)


@pytest.fixture
def sleeps(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(ai_service.asyncio, "sleep", fake_sleep)
    return delays


def test_checklist_prompt_defaults_weather():
    request = ChecklistGenerateRequest(destination="Lisbon", dateRange="2026-05-01 to 2026-05-07", purpose="vacation")

    prompt = ai_service.build_checklist_prompt(request)

    assert "vacation trip to Lisbon from 2026-05-01 to 2026-05-07" in prompt
    assert "Weather: Mild." in prompt
    assert "Categories: Clothing, Essentials, Toiletries, Tech." in prompt


def test_generate_text_sends_prompt_and_reads_parts():
    client, seen = mock_client(httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "Clothing:\n"}, {"text": "- socks"}]}}]}))

    text = asyncio.run(ai_service.generate_text("pack for Oslo", client=client))

    assert text == "Clothing:\n- socks"
    request = seen[0]
    assert request.url.path == "/v1beta/models/gemini-2.0-flash:generateContent"
    assert request.headers["x-goog-api-key"] == "test-key"
    assert json.loads(request.content)["contents"][0]["parts"][0]["text"] == "pack for Oslo"


@pytest.mark.parametrize("response", [
    httpx.Response(503, text="overloaded"),
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"candidates": []}),
    httpx.Response(200, json=gemini_body("   ")),
    httpx.Response(200, json={"candidates": [{"content": {"parts": [None]}}]}),
    httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": 7}]}}]}),
])
def test_generate_text_failures_raise_generation_error(response):
    with pytest.raises(ai_service.GenerationError):
        asyncio.run(ai_service.generate_text("prompt", client=mock_client(response)[0]))


def test_generate_text_connection_error():
    client, seen = mock_client(httpx.ConnectError("connection refused"))

    with pytest.raises(ai_service.GenerationError):
        asyncio.run(ai_service.generate_text("prompt", client=client))


def test_generate_text_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)

    with pytest.raises(ai_service.GenerationError):
        asyncio.run(ai_service.generate_text("prompt", client=mock_client()[0]))


def test_backoff_retries_then_succeeds(sleeps):
    client, seen = mock_client(
        httpx.Response(500, text="boom"),
        httpx.Response(429, text="slow down"),
        httpx.Response(200, json=gemini_body("Tech:\n- charger")),
    )

    text = asyncio.run(ai_service.generate_with_backoff("prompt", client=client))

    assert text == "Tech:\n- charger"
    assert sleeps == [1.0, 2.0]
    assert len(seen) == 3


def test_backoff_gives_up_after_max_retries(sleeps):
    client, seen = mock_client(*[httpx.Response(500, text="boom") for _ in range(3)])

    with pytest.raises(ai_service.GenerationError):
        asyncio.run(ai_service.generate_with_backoff("prompt", client=client))

    assert len(seen) == 3
    # No sleep after the final attempt.
    assert sleeps == [1.0, 2.0]


def test_generate_activities_structured(sleeps):
    output = 'Here:\n[{"name": "Hike", "description": "Trail walk"}, {"name": "Museum"}]'
    client, seen = mock_client(httpx.Response(200, json=gemini_body(output)))

    result = asyncio.run(ai_service.generate_activities("Paris", client=client))

    assert result["format"] == "structured"
    assert [a.model_dump() for a in result["activities"]] == [
        {"name": "Hike", "description": "Trail walk"},
        {"name": "Museum", "description": ""},
    ]


def test_generate_activities_text_fallback(sleeps):
    client, seen = mock_client(httpx.Response(200, json=gemini_body("1. Hike\n2. Museum")))

    result = asyncio.run(ai_service.generate_activities("Paris", client=client))

    assert result == {"suggestions": "1. Hike\n2. Museum", "format": "text"}


def test_generate_activities_bracketed_aside_stays_text(sleeps):
    output = "1. Hike the ridge [2]\n2. Museum visit\n3. Food tour"
    client, seen = mock_client(httpx.Response(200, json=gemini_body(output)))

    result = asyncio.run(ai_service.generate_activities("Paris", client=client))

    assert result == {"suggestions": output, "format": "text"}


def test_generate_activities_array_without_records_stays_text(sleeps):
    output = 'Top picks: ["Hike", "Museum"]'
    client, seen = mock_client(httpx.Response(200, json=gemini_body(output)))

    result = asyncio.run(ai_service.generate_activities("Paris", client=client))

    assert result["format"] == "text"


def test_backoff_retries_malformed_parts(sleeps):
    client, seen = mock_client(
        httpx.Response(200, json={"candidates": [{"content": {"parts": [None]}}]}),
        httpx.Response(200, json=gemini_body("Tech:\n- charger")),
    )

    assert asyncio.run(ai_service.generate_with_backoff("prompt", client=client)) == "Tech:\n- charger"
    assert sleeps == [1.0]
