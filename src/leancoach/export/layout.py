"""
A3 Print Layout

Grid definition for the printed A3 and per-region text truncation.

Overflow clipping does not survive print rendering, so every region is cut
to a character budget before the page is laid out. The budgets are sized
for A3 landscape at the template's font sizes.
"""
from dataclasses import dataclass
from typing import List

from ..models.a3_document import A3Document, SectionType, SECTION_ORDER, SECTION_TITLES

ELLIPSIS = "…"


@dataclass(frozen=True)
class GridRegion:
    """Placement of one section on the page grid"""
    section_type: SectionType
    grid_column: str        # CSS grid-column value on the 2-column page grid
    text_columns: int       # CSS multi-column count inside the region
    char_budget: int


# project_info spans the full width; left column tells the problem,
# right column the solution.
A3_GRID = {
    SectionType.PROJECT_INFO: GridRegion(SectionType.PROJECT_INFO, "1 / span 2", 3, 600),
    SectionType.BACKGROUND: GridRegion(SectionType.BACKGROUND, "1", 2, 800),
    SectionType.CURRENT_STATE: GridRegion(SectionType.CURRENT_STATE, "1", 2, 1200),
    SectionType.GOALS: GridRegion(SectionType.GOALS, "1", 1, 600),
    SectionType.ROOT_CAUSE: GridRegion(SectionType.ROOT_CAUSE, "1", 2, 1200),
    SectionType.COUNTERMEASURES: GridRegion(SectionType.COUNTERMEASURES, "2", 2, 1200),
    SectionType.IMPLEMENTATION: GridRegion(SectionType.IMPLEMENTATION, "2", 2, 1000),
    SectionType.FOLLOW_UP: GridRegion(SectionType.FOLLOW_UP, "2", 1, 800),
}


@dataclass
class RegionView:
    """Section content prepared for rendering"""
    section_type: SectionType
    title: str
    text: str
    grid_column: str
    text_columns: int
    char_budget: int
    truncated: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.text


def _normalize(text: str) -> str:
    """Collapse runs of spaces/tabs per line and drop blank-line runs"""
    lines = [" ".join(line.split()) for line in (text or "").splitlines()]
    out = []
    for line in lines:
        if not line and (not out or not out[-1]):
            continue
        out.append(line)
    return "\n".join(out).strip()


def truncate_to_budget(text: str, budget: int) -> str:
    """
    Cut text so that it fits `budget` characters, ellipsis included.

    Cuts at the last whitespace inside the budget; falls back to a hard cut
    when the first word alone is longer than the budget.
    """
    if budget <= 0:
        return ""

    text = _normalize(text)
    if len(text) <= budget:
        return text

    limit = budget - len(ELLIPSIS)
    if limit <= 0:
        return ELLIPSIS[:budget]

    window = text[:limit + 1]
    boundary = max(window.rfind(" "), window.rfind("\n"))
    if boundary > 0:
        cut = text[:boundary]
    else:
        cut = text[:limit]

    return cut.rstrip(" \n.,;:-") + ELLIPSIS


def prepare_regions(document: A3Document) -> List[RegionView]:
    """Apply budgets to every section, in canonical order"""
    regions = []
    for section_type in SECTION_ORDER:
        region = A3_GRID[section_type]
        section = document.get_section(section_type)
        raw = _normalize(section.content if section else "")
        text = truncate_to_budget(raw, region.char_budget)
        regions.append(RegionView(
            section_type=section_type,
            title=SECTION_TITLES[section_type],
            text=text,
            grid_column=region.grid_column,
            text_columns=region.text_columns,
            char_budget=region.char_budget,
            truncated=text != raw,
        ))
    return regions
