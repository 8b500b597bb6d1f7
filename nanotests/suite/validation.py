"""
Schema validation for check suites.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import AssertOp, AuthType, StepType

HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"}

# Per-operator field requirements
PATH_REQUIRED_OPS = {
    AssertOp.JSONPATH_EXISTS,
    AssertOp.JSONPATH_EQ,
    AssertOp.XPATH_TEXT_EQ,
    AssertOp.XPATH_NAME_EQ,
    AssertOp.XPATH_COUNT_EQ,
}
NAME_REQUIRED_OPS = {
    AssertOp.HEADER_EQ,
    AssertOp.HEADER_EXISTS,
    AssertOp.HEADER_ABSENT,
    AssertOp.URL_PARAM_EQ,
    AssertOp.URL_HAS_PARAM,
}
VALUE_REQUIRED_OPS = {
    AssertOp.STATUS_EQ,
    AssertOp.HEADER_EQ,
    AssertOp.BODY_EQ,
    AssertOp.BODY_MATCHES,
    AssertOp.JSONPATH_EQ,
    AssertOp.XPATH_TEXT_EQ,
    AssertOp.XPATH_NAME_EQ,
    AssertOp.XPATH_COUNT_EQ,
    AssertOp.URL_PROTOCOL_EQ,
    AssertOp.URL_DOMAIN_EQ,
    AssertOp.URL_RESOURCE_EQ,
    AssertOp.URL_PARAM_EQ,
}
INT_VALUE_OPS = {AssertOp.STATUS_EQ, AssertOp.XPATH_COUNT_EQ}


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "steps[0].check.op"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"  {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"     Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"     Hint: {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Schema Validator
# ─────────────────────────────────────────────────────────────────────────────

class SchemaValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"version", "name", "server", "steps"}
    OPTIONAL_TOP_LEVEL = {"env", "defaults"}
    VALID_STEP_TYPES = {t.value for t in StepType}
    VALID_ASSERT_OPS = {op.value for op in AssertOp}
    VALID_AUTH_TYPES = {t.value for t in AuthType}

    AUTH_CREDENTIALS = {
        "bearer": ("token",),
        "api_key": ("key",),
        "basic": ("username", "password"),
    }

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()
        self.step_ids: set[str] = set()
        self.request_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if self.result.is_valid:
            for check in (
                self._validate_version,
                self._validate_name,
                self._validate_server,
                self._validate_env,
                self._validate_defaults,
                self._validate_steps,
            ):
                check()
        return self.result

    # Helpers

    def _error(self, path: str, message: str, value: Any = None, hint: str | None = None) -> None:
        self.result.add_error(path, message, value, hint)

    def _optional(self, path: str, value: Any, kind: type, message: str) -> bool:
        """Record an error if value is set but not of kind; True when usable."""
        if value is None:
            return False
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            self._error(path, message, value)
            return False
        return True

    def _millis(self, path: str, value: Any) -> None:
        if self._optional(path, value, int, "Must be a non-negative integer (milliseconds)") and value < 0:
            self._error(path, "Must be a non-negative integer (milliseconds)", value)

    @staticmethod
    def _choices(values: set[str]) -> str:
        return ", ".join(sorted(values))

    # Top level

    def _validate_top_level(self) -> None:
        known = self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL
        keys = set(self.data)
        for key in sorted(self.REQUIRED_TOP_LEVEL - keys):
            self._error(key, f"Required field '{key}' is missing", hint=f"Add '{key}:' to your suite file")
        for key in sorted(keys - known):
            self._error(key, f"Unknown top-level field '{key}'", hint=f"Valid fields are: {self._choices(known)}")

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self._error("version", "Must be an integer", version, "Use 'version: 1'")
        elif version < 1:
            self._error("version", "Must be >= 1", version)

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self._error("name", "Must be a string", name)
        elif not name.strip():
            self._error("name", "Cannot be empty", hint="Provide a descriptive name for your suite")

    def _validate_server(self) -> None:
        server = self.data.get("server")
        if not isinstance(server, dict):
            self._error("server", "Must be an object", server)
            return

        url = server.get("url")
        if not url:
            self._error("server.url", "Required", hint="Add 'url: \"http://...\"' to server config")
        elif not isinstance(url, str):
            self._error("server.url", "Must be a string", url)
        elif not url.startswith(("http://", "https://")):
            self._error(
                "server.url", "Must be a valid HTTP(S) URL", url,
                "URL should start with 'http://' or 'https://'",
            )

        if server.get("auth") is not None:
            self._validate_auth(server["auth"])

    def _validate_env(self) -> None:
        self._optional("env", self.data.get("env"), dict, "Must be an object (key-value pairs)")

    def _validate_defaults(self) -> None:
        defaults = self.data.get("defaults")
        if not self._optional("defaults", defaults, dict, "Must be an object"):
            return
        self._millis("defaults.timeout_ms", defaults.get("timeout_ms"))
        self._optional("defaults.follow_redirects", defaults.get("follow_redirects"), bool, "Must be true or false")

    # Steps

    def _validate_steps(self) -> None:
        steps = self.data.get("steps")
        if not isinstance(steps, list):
            self._error("steps", "Must be a list", steps)
        elif not steps:
            self._error("steps", "Must contain at least one step", hint="Add at least one request or assert step")
        else:
            for i, step in enumerate(steps):
                self._validate_step(f"steps[{i}]", step)

    def _validate_step(self, path: str, step: Any) -> None:
        if not isinstance(step, dict):
            self._error(path, "Step must be an object", step)
            return

        step_id = step.get("id")
        self._register_id(f"{path}.id", step_id)

        step_type = step.get("type")
        if step_type not in self.VALID_STEP_TYPES:
            self._error(
                f"{path}.type", "Invalid step type", step_type,
                f"Valid types: {self._choices(self.VALID_STEP_TYPES)}",
            )
            return

        self._millis(f"{path}.delay_ms", step.get("delay_ms"))

        if step_type == StepType.REQUEST.value:
            self._validate_request_step(path, step)
            if isinstance(step_id, str):
                self.request_ids.add(step_id)
        else:
            self._validate_assert_step(path, step)

    def _register_id(self, path: str, step_id: Any) -> None:
        if not step_id:
            self._error(path, "Step must have an 'id' field", hint="Add a unique identifier like 'id: my_step'")
        elif not isinstance(step_id, str):
            self._error(path, "Step id must be a string", step_id)
        elif step_id in self.step_ids:
            self._error(path, "Duplicate step id", step_id, "Each step must have a unique id")
        else:
            self.step_ids.add(step_id)

    def _validate_request_step(self, path: str, step: dict) -> None:
        resource = step.get("resource")
        if not resource:
            self._error(
                f"{path}.resource", "request step requires a 'resource' field",
                hint="Specify the path to request, e.g. 'resource: /index.html'",
            )
        else:
            self._optional(f"{path}.resource", resource, str, "Resource must be a string")

        method = step.get("method", "GET")
        if not isinstance(method, str) or method.upper() not in HTTP_METHODS:
            self._error(
                f"{path}.method", "Invalid HTTP method", method,
                f"Valid methods: {self._choices(HTTP_METHODS)}",
            )

        self._optional(f"{path}.headers", step.get("headers"), dict, "Headers must be an object")
        self._optional(f"{path}.body", step.get("body"), str, "Body must be a string")

    def _validate_assert_step(self, path: str, step: dict) -> None:
        check = step.get("check")
        if not check:
            self._error(f"{path}.check", "assert step requires a 'check' field")
            return
        if not isinstance(check, dict):
            self._error(f"{path}.check", "Check must be an object", check)
            return

        op_value = check.get("op")
        if op_value not in self.VALID_ASSERT_OPS:
            self._error(
                f"{path}.check.op", "Invalid assertion operator", op_value,
                f"Valid operators: {self._choices(self.VALID_ASSERT_OPS)}",
            )
            return
        op = AssertOp(op_value)

        # URL checks on a literal URL don't need a response
        needs_response = not (op.is_url_op and check.get("url"))
        from_step = step.get("from")
        if needs_response or from_step is not None:
            self._validate_from(f"{path}.from", from_step)

        prefix = f"{path}.check"
        self._optional(f"{prefix}.url", check.get("url"), str, "URL must be a string")
        self._optional(f"{prefix}.header", check.get("header"), str, "Header must be a string")

        for required, key, description in (
            (PATH_REQUIRED_OPS, "path", "a 'path' field (JSONPath or XPath expression)"),
            (NAME_REQUIRED_OPS, "name", "a 'name' field (header or param name)"),
        ):
            if op in required and not check.get(key):
                self._error(f"{prefix}.{key}", f"Operator '{op.value}' requires {description}")
            else:
                self._optional(f"{prefix}.{key}", check.get(key), str, f"{key.capitalize()} must be a string")

        if op in VALUE_REQUIRED_OPS and "value" not in check:
            self._error(f"{prefix}.value", f"Operator '{op.value}' requires a 'value' field")
        elif op in INT_VALUE_OPS:
            value = check.get("value")
            if not isinstance(value, int) or isinstance(value, bool):
                self._error(f"{prefix}.value", f"Operator '{op.value}' requires an integer value", value)

    def _validate_from(self, path: str, from_step: Any) -> None:
        if not from_step:
            self._error(path, "assert step requires a 'from' field",
                        hint="Specify which request step's response to assert on")
        elif not isinstance(from_step, str):
            self._error(path, "'from' must be a string (step id)", from_step)
        elif from_step not in self.request_ids:
            self._error(
                path, "References unknown request step", from_step,
                f"Available request steps: {self._choices(self.request_ids) or '(none yet)'}",
            )

    def _validate_auth(self, auth: Any) -> None:
        """Validate auth configuration for the HTTP client."""
        if not isinstance(auth, dict):
            self._error("server.auth", "Must be an object", auth)
            return

        auth_type = auth.get("type")
        if auth_type not in self.VALID_AUTH_TYPES:
            self._error(
                "server.auth.type", "Invalid auth type", auth_type,
                f"Valid types: {self._choices(self.VALID_AUTH_TYPES)}",
            )
            return

        for key in self.AUTH_CREDENTIALS[auth_type]:
            path = f"server.auth.{key}"
            if not auth.get(key):
                self._error(
                    path, f"Required for {auth_type} auth",
                    hint=f"Add '{key}: \"...\"' or '{key}: \"{{{{env.{key.upper()}}}}}\"'",
                )
            else:
                self._optional(path, auth[key], str, "Must be a string")

        self._optional("server.auth.header", auth.get("header"), str, "Must be a string")
