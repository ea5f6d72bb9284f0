from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

class ChecklistItem(BaseModel):
    """A single packable thing with a checked/unchecked state."""
    label: str = Field(..., examples=["3 T-shirts"])
    checked: bool = False

class ChecklistSection(BaseModel):
    """A titled group of checklist items, derived from one heading line."""
    # Older trip records stored the heading under `category`.
    title: str = Field(..., min_length=1, validation_alias=AliasChoices("title", "category"), examples=["Clothing"])
    items: List[ChecklistItem] = Field(default_factory=list)
    expanded: bool = True

class ChecklistView(BaseModel):
    """Parsed checklist plus the per-section visibility map, keyed by section index."""
    sections: List[ChecklistSection] = Field(default_factory=list)
    expanded: Dict[int, bool] = Field(default_factory=dict)

class ChecklistParseRequest(BaseModel):
    """Schema for parsing raw generated text into a checklist."""
    text: Optional[str] = Field(None, examples=["Clothing:\n- 3 T-shirts\nEssentials:\n- Passport"])

class ChecklistGenerateRequest(BaseModel):
    """Schema for requesting a generated packing checklist."""
    model_config = ConfigDict(populate_by_name=True)

    # Optional here so that missing fields are reported as a 400 with an `error` body.
    destination: Optional[str] = Field(None, examples=["Lisbon"])
    date_range: Optional[str] = Field(None, alias="dateRange", examples=["2026-05-01 to 2026-05-07"])
    purpose: Optional[str] = Field(None, examples=["vacation"])
    weather: Optional[str] = Field(None, examples=["Mild"])

class ChecklistGenerateResponse(BaseModel):
    """Raw checklist text returned by the generator."""
    checklist: str
