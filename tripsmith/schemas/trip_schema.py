import datetime
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from tripsmith.schemas.checklist_schema import ChecklistSection

class TripCreate(BaseModel):
    """Schema for creating a new trip."""
    destination: str = Field(..., min_length=1, examples=["Lisbon"])
    start_date: datetime.date = Field(..., examples=["2026-05-01"])
    end_date: datetime.date = Field(..., examples=["2026-05-07"])
    purpose: str = Field(..., min_length=1, examples=["vacation"])
    weather: Optional[str] = Field(None, examples=["Mild"])

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date.")
        return self

    @property
    def date_range(self) -> str:
        return f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"

class ChecklistReplace(BaseModel):
    """Schema for replacing a trip's whole checklist."""
    sections: List[ChecklistSection]

class TripInfo(BaseModel):
    """Schema for returning trip information."""
    id: str
    user_id: str
    destination: str
    purpose: str = ""
    date_range: str
    weather: Optional[str] = None
    checklist: List[ChecklistSection] = Field(default_factory=list)
    created_at: str
