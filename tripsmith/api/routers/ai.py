import logging
from typing import Any, Optional

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from tripsmith.schemas.activity_schema import ActivityGenerateRequest, ActivityGenerateResponse
from tripsmith.schemas.checklist_schema import ChecklistGenerateRequest, ChecklistGenerateResponse
from tripsmith.services import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["AI Features"],
    responses={
        400: {"description": "Missing required fields"},
        500: {"description": "Generation failed after retries"},
    },
)

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

def _read_request(model: type[BaseModel], payload: Any) -> Optional[BaseModel]:
    """
    Validates a raw JSON body. No body, a non-object body or wrongly typed
    fields all count as missing fields, so they give None.
    """
    if not isinstance(payload, dict):
        return None
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.info("Rejected %s body: %s", model.__name__, e.errors())
        return None

@router.post("/gemini", response_model=ChecklistGenerateResponse)
async def generate_checklist(payload: Any = Body(None)):
    """
    Generates a plain-text packing checklist for a trip.
    Expects `destination`, `dateRange` and `purpose`; weather defaults to "Mild".
    """
    request = _read_request(ChecklistGenerateRequest, payload)
    if request is None or not request.destination or not request.date_range or not request.purpose:
        return _error(400, "Missing required fields: destination, dateRange, purpose")

    try:
        text = await ai_service.generate_checklist_text(request)
    except ai_service.GenerationError as e:
        logger.error("Gemini API Error: %s", e)
        return _error(500, "Gemini API failed. Please try again.")
    return {"checklist": text}

@router.post("/gemini-activities", response_model=ActivityGenerateResponse, response_model_exclude_none=True)
async def generate_activities(payload: Any = Body(None)):
    """
    Suggests activities for a `destination`, as parsed records when the model
    returned a JSON array and as raw text otherwise.
    """
    request = _read_request(ActivityGenerateRequest, payload)
    if request is None or not request.destination:
        return _error(400, "Missing required field: destination")

    try:
        return await ai_service.generate_activities(request.destination)
    except ai_service.GenerationError as e:
        logger.error("Gemini Activity API Error: %s", e)
        return _error(500, "Failed to generate activity suggestions. Please try again.")
