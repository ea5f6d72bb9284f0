from fastapi import APIRouter, Body
from typing import Any, List

from tripsmith.schemas.activity_schema import Activity
from tripsmith.schemas.checklist_schema import ChecklistParseRequest, ChecklistView
from tripsmith.services import activity_service, checklist_service

router = APIRouter(
    tags=["Parsing"],
)

@router.post("/checklists/parse", response_model=ChecklistView)
def parse_checklist(request: ChecklistParseRequest):
    """
    Parses generated checklist text into sections and items.
    Never fails on odd input; text without headings gives an empty checklist.
    """
    return checklist_service.parse_checklist(request.text)

@router.post("/activities/normalize", response_model=List[Activity])
def normalize_activities(payload: Any = Body(None)):
    """
    Normalizes a generator response (records, free text, or the
    structured/text envelope) into an ordered activity list.
    """
    return activity_service.normalize_activities(payload)
