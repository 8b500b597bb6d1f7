"""
Check suites: YAML files describing requests against a server and
the assertions to run on their responses.

Usage:
    from nanotests.suite import load_suite, validate_suite_yaml

    suite, result = load_suite("checks/site.yaml")
    if not result.is_valid:
        print(result)
"""

from .loader import load_suite, validate_suite_yaml
from .models import (
    AssertCheck,
    AssertOp,
    AssertStep,
    AuthConfig,
    AuthType,
    Defaults,
    RequestStep,
    ServerConfig,
    Step,
    StepType,
    Suite,
)
from .validation import SchemaValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suite",
    "validate_suite_yaml",
    # Models
    "Suite",
    "ServerConfig",
    "Defaults",
    "Step",
    "RequestStep",
    "AssertStep",
    "AssertCheck",
    "StepType",
    "AssertOp",
    "AuthConfig",
    "AuthType",
    # Validation
    "ValidationResult",
    "ValidationError",
    "SchemaValidator",
]
