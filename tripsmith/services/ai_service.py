import asyncio
import json
import logging
from typing import Optional

import httpx

from tripsmith.core.config import settings
from tripsmith.schemas.checklist_schema import ChecklistGenerateRequest
from tripsmith.services.activity_service import extract_structured_activities, normalize_activities

logger = logging.getLogger(__name__)

DEFAULT_WEATHER = "Mild"
CHECKLIST_CATEGORIES = ["Clothing", "Essentials", "Toiletries", "Tech"]

class GenerationError(Exception):
    """The text generator failed or returned something unusable."""

def build_checklist_prompt(request: ChecklistGenerateRequest) -> str:
    weather = request.weather or DEFAULT_WEATHER
    return (
        f"Create a categorized travel packing checklist for a {request.purpose} trip "
        f"to {request.destination} from {request.date_range}.\n"
        f"Weather: {weather}.\n"
        f"Categories: {', '.join(CHECKLIST_CATEGORIES)}.\n"
        "Return as plain text."
    )

def build_activities_prompt(destination: str) -> str:
    return f"""You are a travel expert. Suggest 5 unique and memorable activities for a trip to {destination}.

For each activity, provide:
- A clear activity name
- A brief description (1-2 sentences) explaining what it is and why it's worth doing

Format your response as a JSON array with objects containing "name" and "description" fields.
Example format:
[
  {{"name": "Visit the Eiffel Tower", "description": "Iconic landmark offering stunning panoramic views of Paris from its observation decks."}},
  {{"name": "Seine River Cruise", "description": "Relaxing boat tour showcasing Paris's beautiful architecture and bridges."}}
]

Only return the JSON array, no additional text."""

async def generate_text(prompt: str, model: Optional[str] = None, client: Optional[httpx.AsyncClient] = None) -> str:
    """
    Generates text with a single call to the Gemini generateContent API.
    Raises GenerationError for transport failures, error statuses and bodies without text.
    """
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise GenerationError("Gemini API key is not configured.")

    model = model or settings.GEMINI_MODEL
    url = f"{settings.GEMINI_API_BASE}/models/{model}:generateContent"
    headers = {
        'x-goog-api-key': api_key,
        'Content-Type': 'application/json'
    }
    body = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {"temperature": 0.7},
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.GENERATION_TIMEOUT)

    try:
        logger.debug("Sending request to Gemini with model: %s", model)
        response = await client.post(url, json=body, headers=headers)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.warning("HTTP error from Gemini: %s - %s", e.response.status_code, e.response.text[:200])
        raise GenerationError(f"Error from Gemini: {e.response.status_code}") from e
    except httpx.RequestError as e:
        raise GenerationError(f"Failed to connect to Gemini: {e}") from e
    except json.JSONDecodeError as e:
        raise GenerationError(f"Gemini returned invalid JSON response: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        logger.warning("Unexpected response structure from Gemini: %s", str(data)[:500])
        raise GenerationError("Gemini returned an unexpected response structure") from e

    if not text.strip():
        raise GenerationError("Gemini returned an empty response")
    return text

async def generate_with_backoff(
    prompt: str,
    max_retries: Optional[int] = None,
    initial_delay: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Calls generate_text up to `max_retries` times, sleeping
    initial_delay * 2**attempt between failed attempts.
    The last GenerationError is re-raised once attempts run out.
    """
    max_retries = settings.GENERATION_MAX_RETRIES if max_retries is None else max_retries
    initial_delay = settings.GENERATION_INITIAL_DELAY if initial_delay is None else initial_delay

    last_error = GenerationError("No generation attempts were made")
    for attempt in range(max_retries):
        try:
            return await generate_text(prompt, client=client)
        except GenerationError as e:
            last_error = e
            if attempt < max_retries - 1:
                delay = initial_delay * (2 ** attempt)
                logger.warning("Retry %d/%d after %.1fs: %s", attempt + 1, max_retries, delay, e)
                await asyncio.sleep(delay)

    logger.error("Generation failed after %d attempts: %s", max_retries, last_error)
    raise last_error

async def generate_checklist_text(request: ChecklistGenerateRequest, client: Optional[httpx.AsyncClient] = None) -> str:
    """Returns the raw checklist text for a trip request."""
    return await generate_with_backoff(build_checklist_prompt(request), client=client)

async def generate_activities(destination: str, client: Optional[httpx.AsyncClient] = None) -> dict:
    """
    Asks for activity suggestions. When the output holds a JSON array of
    named records they are returned in the structured format, otherwise the
    raw text. A bracketed aside such as "[2]" is not a record list.
    """
    text = await generate_with_backoff(build_activities_prompt(destination), client=client)

    records = extract_structured_activities(text)
    activities = normalize_activities(records) if records is not None else []
    if activities:
        return {"activities": activities, "format": "structured"}
    return {"suggestions": text, "format": "text"}
