"""
URL assertions.

Checks the parts of a URL as decomposed by nanotests.url.parse_url:

    http://test.com/testpage?id=7
    ^^^^   ^^^^^^^^^^^^^^^^^ ^^^^
    protocol  domain resource params

A URL whose parameters cannot be percent-decoded gives an ERROR result
rather than a failure.
"""

from __future__ import annotations

from typing import Callable

from ..exceptions import DecodeError
from ..url import ParsedUrl, parse_url
from .models import AssertionResult


class UrlAssertions:
    """
    Engine for URL checks.

    Example:
        engine = UrlAssertions()
        engine.protocol("http://test.com/page", "http").passed   # True
        engine.param("http://test.com/p?a=1", "a", "1").passed   # True
        engine.has_param("test.com", "a").passed                 # False
    """

    def protocol(self, url: str, expected: str | None) -> AssertionResult:
        """Assert that the scheme before '://' equals expected."""
        return self._check(url, lambda parsed: parsed.protocol, expected, "Protocol")

    def domain(self, url: str, expected: str) -> AssertionResult:
        """Assert that the host[:port] segment equals expected."""
        return self._check(url, lambda parsed: parsed.domain, expected, "Domain")

    def resource(self, url: str, expected: str | None) -> AssertionResult:
        """Assert that the path segment (without query) equals expected."""
        return self._check(url, lambda parsed: parsed.resource, expected, "Resource")

    def param(self, url: str, name: str, expected: str | None) -> AssertionResult:
        """Assert that the decoded value of parameter `name` equals expected."""
        return self._check(
            url, lambda parsed: parsed.param(name), expected, f"Param {name!r}"
        )

    def has_param(self, url: str, name: str) -> AssertionResult:
        """Assert that the URL carries a parameter called `name`."""
        parsed, error = self._parse(url)
        if error:
            return error

        if parsed.has_param(name):
            return AssertionResult.passed_result(
                message=f"URL has param {name!r}",
                subject=url,
                actual=parsed.param(name),
            )
        return AssertionResult.failed_result(
            message=f"URL has no param {name!r}",
            subject=url,
            expected=f"param {name!r} present",
            actual=sorted(parsed.params),
        )

    def _check(
        self,
        url: str,
        part: Callable[[ParsedUrl], str | None],
        expected: str | None,
        what: str,
    ) -> AssertionResult:
        parsed, error = self._parse(url)
        if error:
            return error
        return AssertionResult.compare(part(parsed), expected, what, subject=url)

    def _parse(self, url: str) -> tuple[ParsedUrl | None, AssertionResult | None]:
        try:
            return parse_url(url), None
        except DecodeError as e:
            return None, AssertionResult.error_result(
                message="Failed to decode URL",
                subject=url,
                details={"raw": e.raw, "error": e.reason},
            )


# Raising helpers, for use directly inside test functions
def assert_url_protocol(url: str, expected: str | None, message: str | None = None) -> None:
    """Assert the URL protocol, e.g. **http**://test.com/testpage."""
    UrlAssertions().protocol(url, expected).raise_for_status(message)


def assert_url_domain(url: str, expected: str, message: str | None = None) -> None:
    """Assert the URL domain, e.g. http://**test.com**/testpage."""
    UrlAssertions().domain(url, expected).raise_for_status(message)


def assert_url_resource(url: str, expected: str | None, message: str | None = None) -> None:
    """Assert the URL resource, e.g. http://test.com**/testpage**."""
    UrlAssertions().resource(url, expected).raise_for_status(message)


def assert_url_param(
    url: str, name: str, expected: str | None, message: str | None = None
) -> None:
    """Assert that parameter `name` is present and equals expected."""
    UrlAssertions().param(url, name, expected).raise_for_status(message)


def assert_url_has_param(url: str, name: str, message: str | None = None) -> None:
    """Assert that the URL has a parameter called `name`."""
    UrlAssertions().has_param(url, name).raise_for_status(message)
