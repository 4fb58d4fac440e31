"""Seeded sprint catalogue for the dashboard demo."""

from dataclasses import dataclass, field, asdict
from types import MappingProxyType
from typing import Mapping

HOURS_PER_DAY = 8

STATUSES = ("Closed", "Validated", "Review", "Open", "On Hold", "In Progress")
TASK_TYPES = ("Bug", "Feature", "Blog", "KB", "UG")
PROJECTS = ("Project A", "Project B", "Project C", "Project D")
PRIORITIES = ("High", "Medium", "Low")

# Chart colours as RGB triples
DEFAULT_PALETTE = (
    (60, 173, 104),
    (117, 87, 73),
    (245, 103, 0),
    (96, 4, 168),
    (3, 113, 234),
    (12, 32, 152),
)


@dataclass(frozen=True)
class StatusCount:
    status: str
    count: int


@dataclass(frozen=True)
class TypeBreakdown:
    type: str
    planned: int
    completed: int


@dataclass(frozen=True)
class IncompleteTaskCell:
    """Incomplete task count for one project/priority cell of the treemap."""

    project: str
    priority: str
    count: int

    @property
    def label(self) -> str:
        """Caption shown on the treemap tile."""
        return f"{self.project}\n{self.priority}"


@dataclass(frozen=True)
class ScopeChange:
    sprint_name: str
    planned: int
    added: int
    removed: int

    def to_dict(self) -> dict:
        return {
            "sprintName": self.sprint_name,
            "planned": self.planned,
            "added": self.added,
            "removed": self.removed
        }


@dataclass(frozen=True)
class SprintRecord:
    """Metrics for a single sprint."""

    name: str
    total_worked_hours: int
    tasks_completed: int
    tasks_assigned: int
    story_points_completed: float
    story_points_planned: float
    task_status: tuple = field(default_factory=tuple)
    task_types: tuple = field(default_factory=tuple)
    incomplete_tasks: tuple = field(default_factory=tuple)

    def to_dict(self) -> dict:
        data = asdict(self)
        for cell in data["incomplete_tasks"]:
            cell["label"] = IncompleteTaskCell(**cell).label
        return data


def calculate_worked_hours(working_days: int, holidays: int = 0) -> int:
    """Person-hours for a sprint: working days minus holidays, 8 hours each.

    Never negative, even when holidays exceed working days.
    """
    return max(0, working_days - holidays) * HOURS_PER_DAY


# One row per sprint. Status counts follow STATUSES, type pairs follow
# TASK_TYPES as (planned, completed), and incomplete counts run project by
# project over PRIORITIES.
SPRINT_SEED = [
    {
        "name": "Sprint 1",
        "working_days": 11,
        "holidays": 0,
        "tasks_completed": 15,
        "tasks_assigned": 25,
        "story_points_completed": 66.0,
        "story_points_planned": 70.0,
        "status": (15, 1, 1, 1, 1, 3),
        "types": ((6, 4), (8, 4), (4, 2), (4, 3), (3, 2)),
        "incomplete": (3, 2, 1, 2, 2, 1, 2, 1, 1, 1, 1, 1),
    },
    {
        "name": "Sprint 2",
        "working_days": 11,
        "holidays": 1,
        "tasks_completed": 14,
        "tasks_assigned": 22,
        "story_points_completed": 65.0,
        "story_points_planned": 68.0,
        "status": (14, 1, 1, 1, 1, 3),
        "types": ((7, 3), (7, 4), (3, 3), (3, 2), (2, 2)),
        "incomplete": (2, 2, 1, 2, 1, 1, 2, 1, 1, 1, 1, 1),
    },
    {
        "name": "Sprint 3",
        "working_days": 11,
        "holidays": 0,
        "tasks_completed": 16,
        "tasks_assigned": 25,
        "story_points_completed": 68.0,
        "story_points_planned": 70.0,
        "status": (16, 0, 2, 1, 1, 4),
        "types": ((9, 4), (9, 5), (3, 2), (2, 3), (2, 2)),
        "incomplete": (2, 3, 1, 2, 2, 1, 2, 2, 1, 1, 1, 1),
    },
    {
        "name": "Sprint 4",
        "working_days": 11,
        "holidays": 1,
        "tasks_completed": 13,
        "tasks_assigned": 21,
        "story_points_completed": 65.0,
        "story_points_planned": 67.0,
        "status": (13, 1, 1, 1, 1, 3),
        "types": ((7, 2), (7, 4), (3, 2), (2, 2), (2, 3)),
        "incomplete": (2, 1, 1, 2, 1, 1, 2, 1, 1, 1, 1, 1),
    },
    {
        "name": "Sprint 5",
        "working_days": 11,
        "holidays": 0,
        "tasks_completed": 15,
        "tasks_assigned": 24,
        "story_points_completed": 67.0,
        "story_points_planned": 70.0,
        "status": (15, 1, 1, 1, 1, 4),
        "types": ((6, 3), (7, 5), (4, 2), (4, 3), (3, 2)),
        "incomplete": (2, 2, 1, 2, 2, 1, 2, 2, 1, 1, 1, 1),
    },
]

SCOPE_CHANGE_SEED = [
    ("Sprint 1", 66, 30, 26),
    ("Sprint 2", 65, 27, 24),
    ("Sprint 3", 68, 25, 23),
    ("Sprint 4", 65, 28, 26),
    ("Sprint 5", 67, 31, 28),
]


def _build_record(row: dict) -> SprintRecord:
    """Turn one seed row into a SprintRecord."""
    cells = [(project, priority) for project in PROJECTS for priority in PRIORITIES]

    return SprintRecord(
        name=row["name"],
        total_worked_hours=calculate_worked_hours(row["working_days"], row["holidays"]),
        tasks_completed=row["tasks_completed"],
        tasks_assigned=row["tasks_assigned"],
        story_points_completed=row["story_points_completed"],
        story_points_planned=row["story_points_planned"],
        task_status=tuple(
            StatusCount(status, count)
            for status, count in zip(STATUSES, row["status"])
        ),
        task_types=tuple(
            TypeBreakdown(task_type, planned, completed)
            for task_type, (planned, completed) in zip(TASK_TYPES, row["types"])
        ),
        incomplete_tasks=tuple(
            IncompleteTaskCell(project, priority, count)
            for (project, priority), count in zip(cells, row["incomplete"])
        ),
    )


def build_catalogue() -> Mapping[str, SprintRecord]:
    """Build the read-only sprint catalogue, keyed by sprint name in seed order."""
    records = {}
    for row in SPRINT_SEED:
        record = _build_record(row)
        records[record.name] = record
    return MappingProxyType(records)


def load_scope_changes() -> tuple:
    """Static scope change series, one entry per sprint."""
    return tuple(ScopeChange(*row) for row in SCOPE_CHANGE_SEED)


def palette_to_hex(palette=DEFAULT_PALETTE) -> list:
    """Convert RGB triples to '#RRGGBB' strings."""
    return [f"#{r:02X}{g:02X}{b:02X}" for r, g, b in palette]
