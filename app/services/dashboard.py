from __future__ import annotations

import threading
from dataclasses import dataclass, field

from app.schemas.auth import AuthUser
from app.schemas.dashboard import DashboardView
from app.schemas.summaries import SummaryRecord


@dataclass
class DashboardState:
    """Per-user view state: a cached mirror of the history plus what is on screen."""

    user: AuthUser
    history: list[SummaryRecord] = field(default_factory=list)
    selected: SummaryRecord | None = None
    summary: str | None = None
    processing: bool = False

    def replace_history(self, records: list[SummaryRecord]) -> None:
        self.history = list(records)
        if self.selected is not None and all(item.id != self.selected.id for item in self.history):
            self.selected = None
            self.summary = None

    def begin_processing(self) -> None:
        self.processing = True
        self.summary = None
        self.selected = None

    def finish_processing(self, summary: str, record: SummaryRecord | None) -> None:
        self.processing = False
        self.summary = summary
        if record is not None:
            self.history = [record] + [item for item in self.history if item.id != record.id]
            self.selected = record

    def fail_processing(self) -> None:
        self.processing = False

    def select(self, record_id: str) -> bool:
        for item in self.history:
            if item.id == record_id:
                self.selected = item
                self.summary = item.summary
                return True
        return False

    def remove(self, record_id: str) -> None:
        self.history = [item for item in self.history if item.id != record_id]
        if self.selected is not None and self.selected.id == record_id:
            self.selected = None
            self.summary = None

    def reset(self) -> None:
        self.selected = None
        self.summary = None

    def view(self) -> DashboardView:
        return DashboardView(
            user=self.user,
            history=list(self.history),
            selected=self.selected,
            summary=self.summary,
            processing=self.processing,
        )


class DashboardRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._states: dict[str, DashboardState] = {}

    def for_user(self, user: AuthUser) -> DashboardState:
        with self._lock:
            state = self._states.get(user.id)
            if state is None:
                state = DashboardState(user=user)
                self._states[user.id] = state
            else:
                state.user = user
            return state

    def discard(self, user_id: str) -> None:
        with self._lock:
            self._states.pop(user_id, None)
