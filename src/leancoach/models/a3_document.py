"""
A3 Document Model

An A3 is a one-page Lean problem-solving report made of eight fixed
sections arranged in a grid.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4


class A3Status(str, Enum):
    """Lifecycle status of an A3 document"""
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


# Allowed status transitions (source -> targets)
STATUS_TRANSITIONS = {
    A3Status.DRAFT: {A3Status.IN_PROGRESS, A3Status.ARCHIVED},
    A3Status.IN_PROGRESS: {A3Status.DRAFT, A3Status.COMPLETED, A3Status.ARCHIVED},
    A3Status.COMPLETED: {A3Status.IN_PROGRESS, A3Status.ARCHIVED},
    A3Status.ARCHIVED: {A3Status.DRAFT},
}


class SectionType(str, Enum):
    """The eight A3 sections, in canonical order"""
    PROJECT_INFO = "project_info"
    BACKGROUND = "background"
    CURRENT_STATE = "current_state"
    GOALS = "goals"
    ROOT_CAUSE = "root_cause"
    COUNTERMEASURES = "countermeasures"
    IMPLEMENTATION = "implementation"
    FOLLOW_UP = "follow_up"


SECTION_ORDER: List[SectionType] = list(SectionType)

SECTION_TITLES = {
    SectionType.PROJECT_INFO: "Project Information",
    SectionType.BACKGROUND: "Background",
    SectionType.CURRENT_STATE: "Current Condition",
    SectionType.GOALS: "Goals / Target Condition",
    SectionType.ROOT_CAUSE: "Root Cause Analysis",
    SectionType.COUNTERMEASURES: "Countermeasures",
    SectionType.IMPLEMENTATION: "Implementation Plan",
    SectionType.FOLLOW_UP: "Follow-up",
}


def can_transition(current: A3Status, target: A3Status) -> bool:
    """Check whether a status change is allowed"""
    return target in STATUS_TRANSITIONS.get(current, set())


@dataclass
class A3Section:
    """One section of an A3 document"""
    id: UUID = field(default_factory=uuid4)
    a3_id: UUID = field(default_factory=uuid4)
    section_type: SectionType = SectionType.PROJECT_INFO
    content: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def title(self) -> str:
        return SECTION_TITLES[self.section_type]

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "a3_id": str(self.a3_id),
            "section_type": self.section_type.value,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class A3Document:
    """
    A3 document entity.

    Belongs to an organization and a department; the author always keeps
    access to it. Sections are created together with the document, one per
    SectionType, and are never added or removed afterwards.
    """
    id: UUID = field(default_factory=uuid4)
    org_id: UUID = field(default_factory=uuid4)
    department_id: UUID = field(default_factory=uuid4)
    author_id: UUID = field(default_factory=uuid4)
    title: str = ""
    description: Optional[str] = None
    status: A3Status = A3Status.DRAFT
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    sections: List[A3Section] = field(default_factory=list)

    def get_section(self, section_type: SectionType) -> Optional[A3Section]:
        for section in self.sections:
            if section.section_type == section_type:
                return section
        return None

    def ordered_sections(self) -> List[A3Section]:
        """Sections sorted in canonical order"""
        return sorted(self.sections, key=lambda s: SECTION_ORDER.index(s.section_type))

    def to_dict(self, include_sections: bool = True) -> dict:
        result = {
            "id": str(self.id),
            "org_id": str(self.org_id),
            "department_id": str(self.department_id),
            "author_id": str(self.author_id),
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
        if include_sections:
            result["sections"] = [s.to_dict() for s in self.ordered_sections()]
        return result
