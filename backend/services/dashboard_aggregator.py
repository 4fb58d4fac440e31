"""Dashboard aggregation over the seeded sprint catalogue."""

from dataclasses import dataclass
from typing import Callable, Mapping, Optional
import logging
import threading

from services.sprint_catalogue import (
    IncompleteTaskCell,
    SprintRecord,
    StatusCount,
    TypeBreakdown,
    build_catalogue,
    load_scope_changes,
)

logger = logging.getLogger(__name__)

ALL_SPRINTS = "All"

# Treemap sizes for the merged and single-sprint views
TOP_INCOMPLETE_ALL = 14
TOP_INCOMPLETE_SINGLE = 12


class UnknownSprint(LookupError):
    """Raised when a selection names no sprint in the catalogue."""

    def __init__(self, name):
        super().__init__(f"Unknown sprint: {name}")
        self.name = name


@dataclass(frozen=True)
class DerivedView:
    """Snapshot of everything the dashboard renders for one selection."""

    selection: str
    total_worked_hours: int
    tasks_completed: int
    tasks_assigned: int
    story_points_completed: float
    story_points_planned: float
    task_status: tuple
    task_types: tuple
    incomplete_tasks: tuple

    def to_dict(self) -> dict:
        """Serialize for the JSON API."""
        return {
            "selection": self.selection,
            "totalWorkedHours": self.total_worked_hours,
            "tasksCompleted": self.tasks_completed,
            "tasksAssigned": self.tasks_assigned,
            "storyPointsCompleted": self.story_points_completed,
            "storyPointsPlanned": self.story_points_planned,
            "taskStatus": [
                {"status": s.status, "count": s.count}
                for s in self.task_status
            ],
            "taskTypes": [
                {"type": t.type, "planned": t.planned, "completed": t.completed}
                for t in self.task_types
            ],
            "incompleteTasks": [
                {
                    "project": n.project,
                    "priority": n.priority,
                    "count": n.count,
                    "label": n.label
                }
                for n in self.incomplete_tasks
            ],
        }


class DashboardAggregator:
    """Holds the current sprint selection and the view derived from it.

    Every successful call to set_selection recomputes the whole view and
    notifies subscribers once with the new snapshot.
    """

    def __init__(self, catalogue: Optional[Mapping[str, SprintRecord]] = None,
                 selection: str = ALL_SPRINTS):
        self._catalogue = catalogue if catalogue is not None else build_catalogue()
        self._scope_changes = load_scope_changes()
        self._subscribers = []
        self._lock = threading.Lock()
        self._view = None
        self.set_selection(selection)

    @property
    def catalogue(self) -> Mapping[str, SprintRecord]:
        return self._catalogue

    @property
    def selection(self) -> str:
        return self._view.selection

    def sprint_options(self) -> list:
        """Names offered in the sprint selector, "All" first."""
        return [ALL_SPRINTS] + list(self._catalogue.keys())

    def scope_changes(self) -> tuple:
        return self._scope_changes

    def subscribe(self, callback: Callable[[DerivedView], None]) -> Callable[[], None]:
        """Register a callback for view refreshes.

        Subscribing a callback that is already registered is a no-op.
        Returns a function that removes the callback again.
        """
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def get_derived_view(self) -> DerivedView:
        return self._view

    def set_selection(self, name: str) -> DerivedView:
        """Select a sprint (or "All") and rebuild the derived view.

        Every subscriber is notified even if an earlier one raises; the
        first subscriber error is re-raised afterwards, with the new view
        already in place.

        Returns:
            The view computed for this selection.

        Raises:
            UnknownSprint: if name is neither "All" nor a catalogue sprint.
                The current selection and view are left as they were.
        """
        if not isinstance(name, str) or (name != ALL_SPRINTS and name not in self._catalogue):
            logger.warning(f"Rejected unknown sprint selection: {name!r}")
            raise UnknownSprint(name)

        with self._lock:
            view = self._compute_view(name)
            self._view = view
            subscribers = list(self._subscribers)
        logger.debug(f"Recomputed dashboard view for {name}")

        first_error = None
        for callback in subscribers:
            try:
                callback(view)
            except Exception as e:
                logger.exception(f"Dashboard subscriber failed for {name}")
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise first_error
        return view

    def _working_set(self, name: str) -> list:
        if name == ALL_SPRINTS:
            return list(self._catalogue.values())
        return [self._catalogue[name]]

    def _compute_view(self, name: str) -> DerivedView:
        sprints = self._working_set(name)
        merged = name == ALL_SPRINTS

        return DerivedView(
            selection=name,
            total_worked_hours=sum(s.total_worked_hours for s in sprints),
            tasks_completed=sum(s.tasks_completed for s in sprints),
            tasks_assigned=sum(s.tasks_assigned for s in sprints),
            story_points_completed=sum(s.story_points_completed for s in sprints),
            story_points_planned=sum(s.story_points_planned for s in sprints),
            task_status=self._status_distribution(sprints),
            task_types=self._type_breakdown(sprints, merged),
            incomplete_tasks=self._incomplete_ranking(sprints, merged),
        )

    @staticmethod
    def _status_distribution(sprints: list) -> tuple:
        """Sum task counts per status, in order of first appearance."""
        totals = {}
        for sprint in sprints:
            for slice_ in sprint.task_status:
                totals[slice_.status] = totals.get(slice_.status, 0) + slice_.count

        return tuple(StatusCount(status, count) for status, count in totals.items())

    @staticmethod
    def _type_breakdown(sprints: list, merged: bool) -> tuple:
        """Planned vs completed per task type.

        A single sprint already has one entry per type, so the flattened list
        is returned as is. The merged view collapses it by type name.
        """
        flattened = [t for sprint in sprints for t in sprint.task_types]
        if not merged:
            return tuple(flattened)

        totals = {}
        for item in flattened:
            planned, completed = totals.get(item.type, (0, 0))
            totals[item.type] = (planned + item.planned, completed + item.completed)

        return tuple(
            TypeBreakdown(task_type, planned, completed)
            for task_type, (planned, completed) in totals.items()
        )

    @staticmethod
    def _incomplete_ranking(sprints: list, merged: bool) -> tuple:
        """Largest project/priority cells first.

        sorted() is stable, so equal counts keep first-appearance order.
        """
        flattened = [n for sprint in sprints for n in sprint.incomplete_tasks]

        if merged:
            totals = {}
            for node in flattened:
                key = (node.project, node.priority)
                totals[key] = totals.get(key, 0) + node.count
            cells = [
                IncompleteTaskCell(project, priority, count)
                for (project, priority), count in totals.items()
            ]
            limit = TOP_INCOMPLETE_ALL
        else:
            cells = flattened
            limit = TOP_INCOMPLETE_SINGLE

        ranked = sorted(cells, key=lambda n: n.count, reverse=True)
        return tuple(ranked[:limit])
