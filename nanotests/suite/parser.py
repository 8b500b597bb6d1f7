"""
Schema parser for check suites.

This module converts validated YAML data into typed Suite structures.
"""

from __future__ import annotations

from typing import Any

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


class SchemaParser:
    """Parses and converts validated YAML to typed Suite structure."""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    def parse(self) -> Suite:
        """Convert validated data to typed Suite."""
        return Suite(
            version=self.data["version"],
            name=self.data["name"],
            server=self._parse_server(),
            env=self.data.get("env") or {},
            defaults=self._parse_defaults(),
            steps=self._parse_steps(),
        )

    def _parse_server(self) -> ServerConfig:
        server = self.data["server"]
        return ServerConfig(
            url=server["url"].rstrip("/"),
            auth=self._parse_auth(server.get("auth")),
        )

    def _parse_auth(self, auth_data: dict | None) -> AuthConfig | None:
        if auth_data is None:
            return None

        return AuthConfig(
            type=AuthType(auth_data["type"]),
            token=auth_data.get("token"),
            header=auth_data.get("header", "X-API-Key"),
            key=auth_data.get("key"),
            username=auth_data.get("username"),
            password=auth_data.get("password"),
        )

    def _parse_defaults(self) -> Defaults:
        defaults = self.data.get("defaults") or {}
        return Defaults(
            timeout_ms=defaults.get("timeout_ms", 30000),
            follow_redirects=defaults.get("follow_redirects", True),
        )

    def _parse_steps(self) -> list[Step]:
        steps: list[Step] = []
        for step in self.data.get("steps", []):
            if step["type"] == "request":
                steps.append(self._parse_request(step))
            elif step["type"] == "assert":
                steps.append(self._parse_assert(step))
        return steps

    def _parse_request(self, step: dict) -> RequestStep:
        return RequestStep(
            id=step["id"],
            type=StepType.REQUEST,
            resource=step["resource"],
            method=step.get("method", "GET").upper(),
            headers={str(k): str(v) for k, v in (step.get("headers") or {}).items()},
            body=step.get("body"),
            delay_ms=step.get("delay_ms"),
        )

    def _parse_assert(self, step: dict) -> AssertStep:
        check_data = step["check"]
        check = AssertCheck(
            op=AssertOp(check_data["op"]),
            path=check_data.get("path"),
            name=check_data.get("name"),
            value=check_data.get("value"),
            url=check_data.get("url"),
            header=check_data.get("header") or "Location",
        )
        return AssertStep(
            id=step["id"],
            type=StepType.ASSERT,
            from_step=step.get("from"),
            check=check,
            delay_ms=step.get("delay_ms"),
        )
