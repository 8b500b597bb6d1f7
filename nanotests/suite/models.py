"""
Typed data structures for check suites.

This module contains all enums and dataclasses that represent
the internal typed structure of a parsed suite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Union


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class StepType(str, Enum):
    """Type of step in a suite."""
    REQUEST = "request"
    ASSERT = "assert"


class AssertOp(str, Enum):
    """Supported assertion operators."""
    # HTTP response
    STATUS_EQ = "status_eq"
    HEADER_EQ = "header_eq"
    HEADER_EXISTS = "header_exists"
    HEADER_ABSENT = "header_absent"
    BODY_EQ = "body_eq"
    BODY_MATCHES = "body_matches"
    # JSON body
    JSONPATH_EXISTS = "jsonpath_exists"
    JSONPATH_EQ = "jsonpath_eq"
    # XML body
    XPATH_TEXT_EQ = "xpath_text_eq"
    XPATH_NAME_EQ = "xpath_name_eq"
    XPATH_COUNT_EQ = "xpath_count_eq"
    # URL (literal 'url' or a URL carried in a response header)
    URL_PROTOCOL_EQ = "url_protocol_eq"
    URL_DOMAIN_EQ = "url_domain_eq"
    URL_RESOURCE_EQ = "url_resource_eq"
    URL_PARAM_EQ = "url_param_eq"
    URL_HAS_PARAM = "url_has_param"

    @property
    def is_url_op(self) -> bool:
        return self.value.startswith("url_")


class AuthType(str, Enum):
    """Supported authentication types for the HTTP client."""
    BEARER = "bearer"
    API_KEY = "api_key"
    BASIC = "basic"


# ─────────────────────────────────────────────────────────────────────────────
# Auth Configuration
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class AuthConfig:
    """
    Authentication configuration for the HTTP client.

    Supports three auth types:
    - bearer: Uses Authorization: Bearer <token> header
    - api_key: Uses a custom header with the API key
    - basic: Uses Authorization: Basic <base64(user:pass)> header
    """
    type: AuthType
    # For bearer auth
    token: str | None = None
    # For api_key auth
    header: str = "X-API-Key"
    key: str | None = None
    # For basic auth
    username: str | None = None
    password: str | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Server & Defaults
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ServerConfig:
    """The host every request step is sent to."""
    url: str = "http://localhost"
    auth: AuthConfig | None = None


@dataclass
class Defaults:
    """Default settings for step execution."""
    timeout_ms: int = 30000
    follow_redirects: bool = True


# ─────────────────────────────────────────────────────────────────────────────
# Steps
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class AssertCheck:
    """Assertion check configuration. Which fields are used depends on op."""
    op: AssertOp
    path: str | None = None  # JSONPath or XPath
    name: str | None = None  # header name or URL param name
    value: Any = None
    url: str | None = None  # literal URL for url_* ops
    header: str = "Location"  # response header holding the URL for url_* ops


@dataclass
class RequestStep:
    """A step that sends an HTTP request to the server."""
    id: str
    type: Literal[StepType.REQUEST] = StepType.REQUEST
    resource: str = "/"
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    delay_ms: int | None = None  # Optional delay after step execution


@dataclass
class AssertStep:
    """A step that checks a previous request's response, or a literal URL."""
    id: str
    type: Literal[StepType.ASSERT] = StepType.ASSERT
    from_step: str | None = None  # 'from' in YAML, renamed to avoid keyword
    check: AssertCheck | None = None
    delay_ms: int | None = None


# Union type for all step variants
Step = Union[RequestStep, AssertStep]


# ─────────────────────────────────────────────────────────────────────────────
# Suite
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Suite:
    """Fully parsed and validated check suite."""
    version: int
    name: str
    server: ServerConfig
    env: dict[str, Any] = field(default_factory=dict)
    defaults: Defaults = field(default_factory=Defaults)
    steps: list[Step] = field(default_factory=list)
