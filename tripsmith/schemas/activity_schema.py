from pydantic import BaseModel, Field
from typing import List, Literal, Optional

class Activity(BaseModel):
    """A named suggested thing to do, with an optional description."""
    name: str = Field(..., min_length=1, examples=["Seine River Cruise"])
    description: str = ""

class ActivityGenerateRequest(BaseModel):
    """Schema for requesting activity suggestions for a destination."""
    destination: Optional[str] = Field(None, examples=["Paris"])

class ActivityGenerateResponse(BaseModel):
    """
    Generator output in one of two shapes: parsed records (`structured`)
    or free text that still needs line-based normalization (`text`).
    """
    format: Literal["structured", "text"]
    activities: Optional[List[Activity]] = None
    suggestions: Optional[str] = None
