"""
Reporter for building and managing run reports.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .models import (
    RunReport,
    StepRecord,
    StepStatus,
    compute_suite_hash,
)

if TYPE_CHECKING:
    from ..suite import Suite

logger = logging.getLogger(__name__)


class Reporter:
    """
    Records step results into a RunReport.

    Example:
        suite, _ = load_suite("checks/site.yaml")
        reporter = Reporter.from_suite(suite)

        reporter.start_run()
        reporter.start_step("home")
        reporter.complete_step_success("home", status_code=200)
        report = reporter.finish_run()
        print(report.summary())
    """

    def __init__(self, report: RunReport):
        self.report = report

    @classmethod
    def from_suite(cls, suite: Suite, run_id: str | None = None) -> Reporter:
        """
        Create a Reporter with one pending StepRecord per suite step.

        Args:
            suite: The parsed suite to create a report for
            run_id: Optional custom run ID (auto-generated if not provided)

        Returns:
            Reporter instance ready to record step results
        """
        report = RunReport(
            suite_name=suite.name,
            suite_version=suite.version,
            suite_hash=compute_suite_hash(_suite_to_dict(suite)),
            server_url=suite.server.url,
        )
        if run_id:
            report.run_id = run_id

        for step in suite.steps:
            record = StepRecord(step_id=step.id, step_type=step.type.value)
            if step.type.value == "request":
                record.method = step.method
                record.resource = step.resource
            elif step.check:
                record.assertion_type = step.check.op.value
                record.assertion_subject = step.check.path or step.check.name
                record.expected_value = step.check.value
            report.add_step(record)

        return cls(report)

    def start_run(self) -> None:
        self.report.start()

    def finish_run(self) -> RunReport:
        """Mark the run as completed and return the final report."""
        self.report.complete()
        return self.report

    def start_step(self, step_id: str) -> StepRecord | None:
        step = self.report.get_step(step_id)
        if step:
            step.start()
        return step

    def _finish(self, step_id: str, status: StepStatus, **attrs: Any) -> StepRecord | None:
        step = self.report.get_step(step_id)
        if step is None:
            logger.warning(f"No step '{step_id}' in report {self.report.run_id}")
            return None
        for name, value in attrs.items():
            setattr(step, name, value)
        step.complete(status)
        return step

    def complete_step_success(
        self,
        step_id: str,
        status_code: int | None = None,
        actual_value: Any = None,
    ) -> StepRecord | None:
        """
        Mark a step as passed.

        Args:
            step_id: The ID of the step
            status_code: For requests, the response status
            actual_value: For assertions, the actual value found

        Returns:
            The StepRecord, or None if step not found
        """
        return self._finish(step_id, StepStatus.PASSED, status_code=status_code, actual_value=actual_value)

    def complete_step_failure(
        self,
        step_id: str,
        failure_message: str,
        expected_value: Any = None,
        actual_value: Any = None,
    ) -> StepRecord | None:
        """
        Mark an assertion step as failed.

        The suite's expected value is kept unless expected_value is given.
        """
        attrs = {"failure_message": failure_message, "actual_value": actual_value}
        if expected_value is not None:
            attrs["expected_value"] = expected_value
        return self._finish(step_id, StepStatus.FAILED, **attrs)

    def complete_step_error(
        self,
        step_id: str,
        error_message: str,
        error_details: dict[str, Any] | None = None,
    ) -> StepRecord | None:
        """Mark a step as errored: it could not be carried out at all."""
        return self._finish(
            step_id, StepStatus.ERROR, error_message=error_message, error_details=error_details
        )

    def skip_step(self, step_id: str, reason: str | None = None) -> StepRecord | None:
        attrs = {"failure_message": f"Skipped: {reason}"} if reason else {}
        return self._finish(step_id, StepStatus.SKIPPED, **attrs)

    def save_json(self, path: str | Path) -> Path:
        """
        Save the report to a JSON file, creating parent directories.

        Args:
            path: Path to save the JSON file

        Returns:
            The path written
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report.to_json(), encoding="utf-8")
        logger.info(f"Report saved to {path}")
        return path


def _suite_to_dict(suite: Suite) -> dict[str, Any]:
    """Convert a Suite to a dict for hashing. Auth secrets are left out."""
    data = dataclasses.asdict(suite)
    data["server"].pop("auth", None)
    return data
