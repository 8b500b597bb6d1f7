"""
Report data models for suite runs.

A RunReport holds the run metadata plus one StepRecord per suite step,
and can be rendered as JSON or as a plain-text summary.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from collections import Counter
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class StepStatus(str, Enum):
    """Status of an individual step execution."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class StepRecord:
    """What one step sent, what it got back and how it ended."""
    step_id: str
    step_type: str  # "request" or "assert"
    status: StepStatus = StepStatus.PENDING

    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # request steps
    method: str | None = None
    resource: str | None = None
    status_code: int | None = None

    # assert steps
    assertion_type: str | None = None  # e.g. "url_param_eq"
    assertion_subject: str | None = None  # path, header or param name
    expected_value: Any = None
    actual_value: Any = None

    error_message: str | None = None
    error_details: dict[str, Any] | None = None
    failure_message: str | None = None

    def start(self) -> None:
        self.status = StepStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self, status: StepStatus) -> None:
        self.status = status
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            self.duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict, one key per field."""
        return {f.name: _json_value(getattr(self, f.name)) for f in fields(self)}


@dataclass
class RunReport:
    """Complete record of one suite run against one server."""
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None

    suite_name: str = ""
    suite_version: int = 1
    suite_hash: str = ""
    server_url: str | None = None

    status: RunStatus = RunStatus.PENDING
    steps: list[StepRecord] = field(default_factory=list)

    total_steps: int = 0
    passed_steps: int = 0
    failed_steps: int = 0
    error_steps: int = 0
    skipped_steps: int = 0

    def start(self) -> None:
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        self.duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000

        counts = Counter(step.status for step in self.steps)
        self.total_steps = len(self.steps)
        self.passed_steps = counts[StepStatus.PASSED]
        self.failed_steps = counts[StepStatus.FAILED]
        self.error_steps = counts[StepStatus.ERROR]
        self.skipped_steps = counts[StepStatus.SKIPPED]

        # any error outranks any failure
        self.status = (
            RunStatus.ERROR if self.error_steps
            else RunStatus.FAILED if self.failed_steps
            else RunStatus.PASSED
        )

    def add_step(self, step: StepRecord) -> None:
        self.steps.append(step)

    def get_step(self, step_id: str) -> StepRecord | None:
        return next((step for step in self.steps if step.step_id == step_id), None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict; step counts go under 'summary'."""
        data = {
            f.name: _json_value(getattr(self, f.name))
            for f in fields(self)
            if f.name not in _COUNT_FIELDS.values() and f.name != "steps"
        }
        data["summary"] = {key: getattr(self, name) for key, name in _COUNT_FIELDS.items()}
        data["steps"] = [step.to_dict() for step in self.steps]
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def summary(self) -> str:
        """Generate a human-readable summary."""
        rule = "-" * 60
        duration = f"{self.duration_ms:.0f}ms" if self.duration_ms is not None else "N/A"
        lines = [
            rule,
            f"  Suite:    {self.suite_name}",
            f"  Server:   {self.server_url or 'N/A'}",
            f"  Run ID:   {self.run_id}",
            f"  Status:   {self.status.value.upper()}",
            f"  Duration: {duration}",
            rule,
            f"  Steps: {self.passed_steps} passed, {self.failed_steps} failed, "
            f"{self.error_steps} errors, {self.skipped_steps} skipped",
            rule,
        ]

        for step in self.steps:
            label = _STEP_LABELS.get(step.status, "????")
            step_duration = f"{step.duration_ms:.0f}ms" if step.duration_ms is not None else "N/A"
            what = (
                f"{step.method} {step.resource}"
                if step.step_type == "request"
                else step.assertion_type or step.step_type
            )
            lines.append(f"  [{label}] {step.step_id}: {what} ({step_duration})")

            if step.failure_message:
                lines.append(f"         {step.failure_message}")
            elif step.error_message:
                lines.append(f"         Error: {step.error_message}")

        lines.append(rule)
        return "\n".join(lines)


_STEP_LABELS = {
    StepStatus.PENDING: "....",
    StepStatus.RUNNING: "RUN ",
    StepStatus.PASSED: "PASS",
    StepStatus.FAILED: "FAIL",
    StepStatus.ERROR: "ERR ",
    StepStatus.SKIPPED: "SKIP",
}


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """
    Compute a short hash of a suite for tracking which version was run.

    Args:
        suite_dict: The suite data as a dict

    Returns:
        First 12 hex chars of the SHA-256 of the normalized JSON
    """
    serialized = json.dumps(suite_dict, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode()).hexdigest()[:12]


_COUNT_FIELDS = {
    "total": "total_steps",
    "passed": "passed_steps",
    "failed": "failed_steps",
    "errors": "error_steps",
    "skipped": "skipped_steps",
}


def _json_value(value: Any) -> Any:
    """Datetimes as ISO strings, enums as values, anything else unencodable as str()."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)
