"""
Turns free-form packing checklist text from the generator into sections and items.

Headings are recognized heuristically; this is a best-effort reading of model
output rather than a grammar. A line that looks like a heading always opens a
new section, even when it also starts with a bullet.
"""
from typing import Dict, List, Optional

from tripsmith.schemas.checklist_schema import ChecklistItem, ChecklistSection, ChecklistView
from tripsmith.services.text_normalizer import (
    EMPHASIS,
    normalize_label,
    normalize_title,
    segment_lines,
)

def is_heading(line: str) -> bool:
    """True when a stripped line should open a new section."""
    return (
        "packing list" in line.lower()
        or line.endswith(":")
        or line.endswith(":" + EMPHASIS)
        or EMPHASIS in line
    )

def build_checklist(text: Optional[str]) -> List[ChecklistSection]:
    """
    Builds the ordered list of sections for a checklist text.

    Item lines seen before the first heading have no section to belong to
    and are dropped. Every item starts unchecked.
    """
    sections: List[ChecklistSection] = []
    current: Optional[ChecklistSection] = None

    for line in segment_lines(text):
        if is_heading(line):
            title = normalize_title(line)
            if not title:
                # Bare emphasis or a lone colon; nothing to title a section with.
                continue
            current = ChecklistSection(title=title)
            sections.append(current)
        elif current is not None:
            current.items.append(ChecklistItem(label=normalize_label(line)))

    return sections

def expanded_map(sections: List[ChecklistSection]) -> Dict[int, bool]:
    """Initial visibility map: every section index starts expanded."""
    return {index: True for index in range(len(sections))}

def parse_checklist(text: Optional[str]) -> ChecklistView:
    """Parses checklist text into a fresh view model."""
    sections = build_checklist(text)
    return ChecklistView(sections=sections, expanded=expanded_map(sections))

def toggle_item(sections: List[ChecklistSection], section_index: int, item_index: int) -> List[ChecklistSection]:
    """
    Returns a new section list with one item's `checked` flag flipped.
    The input list and its sections are left untouched.
    Raises IndexError when either index is out of range.
    """
    if not 0 <= section_index < len(sections):
        raise IndexError(f"Section {section_index} does not exist.")
    section = sections[section_index]
    if not 0 <= item_index < len(section.items):
        raise IndexError(f"Item {item_index} does not exist in section {section_index}.")

    item = section.items[item_index]
    items = list(section.items)
    items[item_index] = item.model_copy(update={"checked": not item.checked})

    updated = list(sections)
    updated[section_index] = section.model_copy(update={"items": items})
    return updated

def toggle_item_in_view(view: ChecklistView, section_index: int, item_index: int) -> ChecklistView:
    """View-model variant of toggle_item; the expanded map is carried over."""
    return view.model_copy(update={"sections": toggle_item(view.sections, section_index, item_index)})

def toggle_section(view: ChecklistView, section_index: int) -> ChecklistView:
    """Returns a new view with one section's expanded flag flipped."""
    if not 0 <= section_index < len(view.sections):
        raise IndexError(f"Section {section_index} does not exist.")

    expanded = dict(view.expanded)
    expanded[section_index] = not expanded.get(section_index, True)

    sections = list(view.sections)
    sections[section_index] = sections[section_index].model_copy(update={"expanded": expanded[section_index]})
    return ChecklistView(sections=sections, expanded=expanded)
