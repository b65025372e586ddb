"""Failure recording, attachments and activity grouping for the host test framework."""
import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from . import artifacts
from .errors import AssertionFailed

log = logging.getLogger(__name__)


@dataclass
class Attachment:
    activity_id: str | None
    name: str
    data: bytes
    kind: str = "text"


class Reporter(ABC):
    """Where user-visible failures and diagnostics go (the host test framework)."""

    @abstractmethod
    def fail(self, message: str):
        ...

    @abstractmethod
    def attach(self, name: str, data: bytes, kind: str = "text"):
        ...

    @contextmanager
    def activity(self, name: str):
        """Group everything reported inside the block under one named step."""
        log.info(f"▶ {name}")
        try:
            yield
        finally:
            log.info(f"■ {name}")


class RecordingReporter(Reporter):
    """Keeps failures and attachments in memory, optionally persisting attachments."""

    def __init__(self, artifacts_dir: Path = None, keep_artifacts: bool = False):
        self.artifacts_dir = artifacts_dir
        self.keep_artifacts = keep_artifacts
        self.failures: list[str] = []
        self.attachments: list[Attachment] = []
        self.activities: list[tuple[str, str]] = []
        self._current: list[str] = []

    @property
    def current_activity(self) -> str | None:
        return self._current[-1] if self._current else None

    def fail(self, message: str):
        log.error(f"Failure: {message}")
        self.failures.append(message)

    def attach(self, name: str, data: bytes, kind: str = "text"):
        activity_id = self.current_activity
        self.attachments.append(Attachment(activity_id=activity_id, name=name, data=data, kind=kind))
        if self.keep_artifacts:
            artifacts.save_attachment(activity_id or "session", name, data, kind, self.artifacts_dir)

    @contextmanager
    def activity(self, name: str):
        activity_id = uuid.uuid4().hex[:12]
        self.activities.append((activity_id, name))
        self._current.append(activity_id)
        try:
            with super().activity(name):
                yield activity_id
        finally:
            self._current.pop()

    def discard_artifacts(self) -> int:
        """Delete persisted attachments of every activity recorded so far."""
        return artifacts.cleanup_artifacts([aid for aid, _ in self.activities] + ["session"], self.artifacts_dir)


class RaisingReporter(RecordingReporter):
    """Records the failure, then raises it so pytest marks the test failed."""

    def fail(self, message: str):
        super().fail(message)
        raise AssertionFailed(message)
