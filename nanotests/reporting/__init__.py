"""
Reporting for suite runs.

Usage:
    reporter = Reporter.from_suite(suite)
    reporter.start_run()
    reporter.start_step("home")
    reporter.complete_step_success("home", status_code=200)
    report = reporter.finish_run()
    print(report.summary())
    reporter.save_json("reports/run.json")
"""

from .models import (
    RunReport,
    RunStatus,
    StepRecord,
    StepStatus,
    compute_suite_hash,
)
from .reporter import Reporter

__all__ = [
    "RunReport",
    "RunStatus",
    "StepRecord",
    "StepStatus",
    "compute_suite_hash",
    "Reporter",
]
