import json
import logging
import re
from typing import Any, List, Optional

from tripsmith.schemas.activity_schema import Activity
from tripsmith.services.text_normalizer import normalize_label, segment_lines, strip_emphasis

logger = logging.getLogger(__name__)

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

def extract_structured_activities(text: Optional[str]) -> Optional[List[Any]]:
    """
    Finds the outermost JSON array in raw generator output and decodes it.
    Returns None when there is no array or it does not decode, so the caller
    can fall back to treating the output as plain text.
    """
    if not text:
        return None
    match = _JSON_ARRAY.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.info("Activity output is not a JSON array, using text format: %s", e)
        return None
    return data if isinstance(data, list) else None

def _activities_from_records(records) -> List[Activity]:
    activities = []
    for record in records:
        if isinstance(record, Activity):
            activities.append(record)
            continue
        if not isinstance(record, dict):
            continue
        name = record.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        description = record.get("description")
        activities.append(Activity(
            name=name,
            description=description if isinstance(description, str) else "",
        ))
    return activities

def _activities_from_text(text: str) -> List[Activity]:
    activities = []
    for line in segment_lines(text):
        name = strip_emphasis(normalize_label(line)).strip()
        if name:
            activities.append(Activity(name=name))
    return activities

def normalize_activities(payload: Any) -> List[Activity]:
    """
    Produces an ordered activity list from whatever the generator returned.

    Accepts a list of {name, description} records (kept as-is, in order),
    free text (one activity per line, markers stripped), or the response
    envelope with either `activities` or `suggestions`. Anything else,
    including None, gives an empty list.
    """
    if isinstance(payload, dict):
        if isinstance(payload.get("activities"), list):
            return _activities_from_records(payload["activities"])
        if isinstance(payload.get("suggestions"), str):
            return _activities_from_text(payload["suggestions"])
        return []
    if isinstance(payload, (list, tuple)):
        return _activities_from_records(payload)
    if isinstance(payload, str):
        return _activities_from_text(payload)
    return []
