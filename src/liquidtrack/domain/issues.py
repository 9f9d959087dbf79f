"""Domain models for logistics issues."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class IssueStatus(str, Enum):
    """Lifecycle status of an issue; any status may follow any other."""

    NEW = "New"
    IN_PROGRESS = "In Progress"
    CUSTOMS = "At Customs"
    DELIVERY = "Delivery"
    DONE = "Done"
    STUCK = "Stuck"

    @classmethod
    def parse(cls, raw: object) -> "IssueStatus":
        """Return the status for a stored value, defaulting to NEW."""
        try:
            return cls(raw)
        except ValueError:
            return cls.NEW


@dataclass(frozen=True)
class Issue:
    """Represents an issue row as held in the local snapshot."""

    id: str
    title: str
    description: str
    status: IssueStatus
    created_at: datetime
    updated_at: datetime
    responsible_id: str
    ai_analysis: str | None = None


@dataclass(frozen=True)
class NewIssue:
    """Payload for an issue that has not been stored yet."""

    title: str
    description: str
    responsible_id: str
    created_at: datetime
    status: IssueStatus = IssueStatus.NEW


@dataclass(frozen=True)
class ResponsiblePerson:
    """A person who can be assigned to an issue."""

    id: str
    name: str
    avatar: str


PEOPLE: tuple[ResponsiblePerson, ...] = (
    ResponsiblePerson("1", "Alexander Ivanov", "https://picsum.photos/id/1005/50/50"),
    ResponsiblePerson("2", "Elena Petrova", "https://picsum.photos/id/1011/50/50"),
    ResponsiblePerson("3", "Dmitry Smirnov", "https://picsum.photos/id/1012/50/50"),
    ResponsiblePerson("4", "Maria Sidorova", "https://picsum.photos/id/1025/50/50"),
)


def find_person(person_id: str | None) -> ResponsiblePerson | None:
    """Return the responsible person for an id, if known."""
    for person in PEOPLE:
        if person.id == person_id:
            return person
    return None
