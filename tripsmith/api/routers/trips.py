import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from typing import List

from tripsmith.core.security import get_current_user
from tripsmith.schemas.checklist_schema import ChecklistGenerateRequest, ChecklistSection, ChecklistView
from tripsmith.schemas.trip_schema import ChecklistReplace, TripCreate, TripInfo
from tripsmith.services import ai_service, checklist_service, trip_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/trips",
    tags=["Trips"],
    responses={404: {"description": "Not found"}},
)

def _get_owned_trip(trip_id: str, current_user: dict) -> dict:
    """Loads a trip, making sure it belongs to the requesting user."""
    try:
        trip = trip_service.get_trip_by_id(trip_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Could not load trip: {e}")
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    if trip.get('user_id') != current_user['uid']:
        raise HTTPException(status_code=403, detail="Not authorized to access this trip")
    return trip

@router.post("", response_model=TripInfo, status_code=status.HTTP_201_CREATED)
def create_trip(
    trip: TripCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Creates a new trip for the current user. The checklist starts empty.
    """
    try:
        return trip_service.create_trip_for_user(trip_data=trip, user_id=current_user['uid'])
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save trip: {e}")

@router.get("", response_model=List[TripInfo])
def get_user_trips(current_user: dict = Depends(get_current_user)):
    """
    Retrieves all trips for the current user, earliest start date first.
    """
    try:
        return trip_service.get_trips_for_user(user_id=current_user['uid'])
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred: {e}")

@router.get("/{trip_id}", response_model=TripInfo)
def get_single_trip(
    trip_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Retrieves a single trip owned by the current user.
    """
    return _get_owned_trip(trip_id, current_user)

@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(
    trip_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Deletes a trip together with its checklist. Only the owner may delete it.
    """
    _get_owned_trip(trip_id, current_user)
    try:
        trip_service.delete_trip(trip_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete trip: {e}")

@router.put("/{trip_id}/checklist", response_model=List[ChecklistSection])
def replace_checklist(
    trip_id: str,
    request: ChecklistReplace,
    current_user: dict = Depends(get_current_user)
):
    """
    Replaces the trip's whole checklist with the given sections.
    """
    _get_owned_trip(trip_id, current_user)
    try:
        return trip_service.replace_checklist(trip_id, request.sections)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update checklist: {e}")

@router.post("/{trip_id}/checklist/generate", response_model=ChecklistView)
async def generate_trip_checklist(
    trip_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Generates a packing checklist from the trip's details, parses it, and
    stores it in place of the current one. If generation fails the stored
    checklist is left as it was.
    """
    # Firebase Admin calls block, so they run in the threadpool here.
    trip = await run_in_threadpool(_get_owned_trip, trip_id, current_user)
    request = ChecklistGenerateRequest(
        destination=trip.get('destination'),
        date_range=trip.get('date_range'),
        purpose=trip.get('purpose'),
        weather=trip.get('weather'),
    )
    if not request.destination or not request.date_range or not request.purpose:
        raise HTTPException(status_code=400, detail="Trip is missing destination, dates or purpose.")

    try:
        text = await ai_service.generate_checklist_text(request)
    except ai_service.GenerationError as e:
        logger.error("Checklist generation failed for trip %s: %s", trip_id, e)
        raise HTTPException(status_code=500, detail="Failed to generate checklist. Please try again.")

    view = checklist_service.parse_checklist(text)
    try:
        await run_in_threadpool(trip_service.replace_checklist, trip_id, view.sections)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save checklist: {e}")
    return view

@router.patch("/{trip_id}/checklist/{section_index}/items/{item_index}", response_model=List[ChecklistSection])
def toggle_checklist_item(
    trip_id: str,
    section_index: int,
    item_index: int,
    current_user: dict = Depends(get_current_user)
):
    """
    Toggles the checked state of one checklist item and returns the updated checklist.
    """
    _get_owned_trip(trip_id, current_user)
    try:
        updated = trip_service.toggle_checklist_item(trip_id, section_index, item_index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update checklist: {e}")
    if updated is None:
        raise HTTPException(status_code=404, detail="Trip not found")
    return updated
