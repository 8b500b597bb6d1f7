"""
HTTP request and response models for the test client.

These are plain data holders: an HttpRequest is built (and tweaked) by a
test before HttpClient.execute() sends it; the HttpResponse is a fully
read snapshot that assertions can inspect any number of times.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

USER_AGENT = "User-Agent"
CONTENT_TYPE = "Content-Type"


@dataclass
class HttpRequest:
    """
    A request against the client's host.

    Attributes:
        resource: Path (and query) relative to the host, e.g. "/page?a=1"
        method: HTTP method
        headers: Request headers; setting an existing name overwrites it
        body: Raw request body, for POST and friends
    """
    resource: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any header with the same name."""
        self.remove_header(name)
        self.headers[name] = value

    def remove_header(self, name: str) -> None:
        """Remove a header (case-insensitive)."""
        for key in [k for k in self.headers if k.lower() == name.lower()]:
            del self.headers[key]

    def set_user_agent(self, value: str) -> None:
        self.set_header(USER_AGENT, value)

    def set_content(self, data: bytes | str, content_type: str | None = None) -> None:
        """Set the request body; strings are encoded as UTF-8."""
        self.body = data.encode("utf-8") if isinstance(data, str) else data
        if content_type:
            self.set_header(CONTENT_TYPE, content_type)

    @classmethod
    def get(cls, resource: str) -> HttpRequest:
        return cls(resource=resource, method="GET")

    @classmethod
    def post(cls, resource: str, data: bytes | str | None = None) -> HttpRequest:
        request = cls(resource=resource, method="POST")
        if data is not None:
            request.set_content(data)
        return request


@dataclass
class HttpResponse:
    """
    A fully read HTTP response.

    Attributes:
        url: Fully qualified URL the request was sent to
        status: HTTP status code
        reason: Status reason phrase
        headers: Header (name, value) pairs in the order received
        body: Raw response body
    """
    url: str
    status: int
    reason: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    charset: str = "utf-8"

    @property
    def text(self) -> str:
        """Body decoded with the response charset (UTF-8 by default)."""
        return self.body.decode(self.charset, errors="replace")

    def json(self) -> Any:
        return json.loads(self.text)

    def last_header(self, name: str) -> str | None:
        """Get the last value of a header (case-insensitive), or None."""
        wanted = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == wanted:
                return value
        return None

    def has_header(self, name: str) -> bool:
        return self.last_header(name) is not None

    def to_dict(self) -> dict[str, Any]:
        """Summary used in run reports (body truncated)."""
        return {
            "url": self.url,
            "status": self.status,
            "reason": self.reason,
            "headers": dict(self.headers),
            "body": self.text[:500],
        }
