import datetime
import logging
from typing import List, Optional

from firebase_admin import db

from tripsmith.schemas.checklist_schema import ChecklistSection
from tripsmith.schemas.trip_schema import TripCreate
from tripsmith.services.checklist_service import toggle_item

logger = logging.getLogger(__name__)

def _as_list(raw) -> list:
    """
    Reads a stored array. The Realtime Database drops empty lists and returns
    sparse arrays as {"0": {...}, "2": {...}}; holes are skipped.
    """
    if not raw:
        return []
    if isinstance(raw, dict):
        raw = [raw[key] for key in sorted(raw, key=int)]
    return [entry for entry in raw if entry]

def _load_sections(raw) -> List[ChecklistSection]:
    """Reads a stored checklist back into sections."""
    sections = []
    for section in _as_list(raw):
        section = dict(section)
        section['items'] = _as_list(section.get('items'))
        sections.append(ChecklistSection.model_validate(section))
    return sections

def _dump_sections(sections: List[ChecklistSection]) -> list:
    return [section.model_dump() for section in sections]

def _with_defaults(trip_id: str, trip: dict) -> dict:
    trip['id'] = trip_id
    trip['checklist'] = _load_sections(trip.get('checklist'))
    trip.setdefault('purpose', '')
    return trip

def _start_date(trip: dict) -> datetime.date:
    """Start of the trip's date range; trips without a readable one sort first."""
    date_range = trip.get('date_range') or ''
    try:
        return datetime.date.fromisoformat(date_range.split(' to ')[0].strip())
    except ValueError:
        return datetime.date.min

def create_trip_for_user(trip_data: TripCreate, user_id: str):
    """Saves a new trip owned by `user_id`, starting with an empty checklist."""
    data_to_save = {
        "destination": trip_data.destination,
        "purpose": trip_data.purpose,
        "date_range": trip_data.date_range,
        "user_id": user_id,
        "checklist": [],
        "created_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
    if trip_data.weather:
        data_to_save["weather"] = trip_data.weather

    trips_ref = db.reference('trips')
    new_trip_ref = trips_ref.push()
    new_trip_ref.set(data_to_save)

    data_to_save['id'] = new_trip_ref.key
    logger.info("Trip created: %s (%s) for user %s", trip_data.destination, trip_data.date_range, user_id)
    return data_to_save

def get_trips_for_user(user_id: str):
    """Retrieves all trips owned by a user, ordered by start date."""
    try:
        trips_ref = db.reference('trips')
        user_trips = trips_ref.order_by_child('user_id').equal_to(user_id).get()
    except Exception as e:
        logger.error("Error retrieving trips for user %s: %s", user_id, e)
        raise

    if not user_trips:
        return []

    trips_list = [_with_defaults(trip_id, trip_data) for trip_id, trip_data in user_trips.items()]
    trips_list.sort(key=_start_date)
    return trips_list

def get_trip_by_id(trip_id: str) -> Optional[dict]:
    """Retrieves a single trip by its unique ID, or None if it does not exist."""
    trip = db.reference(f'trips/{trip_id}').get()
    if not trip:
        return None
    return _with_defaults(trip_id, trip)

def replace_checklist(trip_id: str, sections: List[ChecklistSection]) -> List[ChecklistSection]:
    """Overwrites the trip's whole checklist. Nothing is merged with the old one."""
    db.reference(f'trips/{trip_id}').update({'checklist': _dump_sections(sections)})
    return sections

def toggle_checklist_item(trip_id: str, section_index: int, item_index: int) -> Optional[List[ChecklistSection]]:
    """
    Flips one item's checked flag and stores the new checklist.
    Returns None when the trip is gone; raises IndexError for a missing section or item.
    """
    trip = get_trip_by_id(trip_id)
    if not trip:
        return None

    updated = toggle_item(trip['checklist'], section_index, item_index)
    return replace_checklist(trip_id, updated)

def delete_trip(trip_id: str) -> bool:
    """Deletes a trip and its embedded checklist. Returns False if it did not exist."""
    trip_ref = db.reference(f'trips/{trip_id}')
    if not trip_ref.get():
        return False
    trip_ref.delete()
    logger.info("Trip deleted: %s", trip_id)
    return True
