"""
HTTP response assertions.

HttpAssertions inspects an already executed HttpResponse, so several
checks can be made against one request. The check_http_* coroutines are
one-shot shortcuts that issue a GET through a client and check it.
JSON bodies are queried with JSONPath (jsonpath_ng).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathParserError

from .models import AssertionResult

if TYPE_CHECKING:
    from ..http import HttpClient, HttpResponse

HTTP_OK = 200
HTTP_NOT_FOUND = 404


class HttpAssertions:
    """
    Engine for checks on an HttpResponse.

    Example:
        engine = HttpAssertions()
        response = await client.get("/api/items")

        engine.ok(response)
        engine.header(response, "Content-Type", "application/json")
        engine.json_path_equals(response, "$.items[0].id", 1)
    """

    def ok(self, response: HttpResponse) -> AssertionResult:
        """Assert that the status code is 200."""
        return self.status(response, HTTP_OK)

    def status(self, response: HttpResponse, code: int) -> AssertionResult:
        """Assert that the status code equals `code`."""
        if response.status == code:
            return AssertionResult.passed_result(
                message=f"Status is {code}",
                subject=response.url,
                actual=response.status,
            )
        return AssertionResult.failed_result(
            message=f"Response for {response.url} is {response.status}",
            subject=response.url,
            expected=code,
            actual=response.status,
            details={"reason": response.reason} if response.reason else None,
        )

    def header(self, response: HttpResponse, name: str, expected: str) -> AssertionResult:
        """Assert that header `name` is present and its last value equals expected."""
        actual = response.last_header(name)
        if actual is None:
            return AssertionResult.failed_result(
                message=f"Header field {name} is missing",
                subject=name,
                expected=expected,
            )
        return AssertionResult.compare(actual, expected, f"Header field {name}", subject=name)

    def has_header(self, response: HttpResponse, name: str) -> AssertionResult:
        """Assert that header `name` is present."""
        actual = response.last_header(name)
        if actual is not None:
            return AssertionResult.passed_result(
                message=f"Header field {name} is present",
                subject=name,
                actual=actual,
            )
        return AssertionResult.failed_result(
            message=f"Header field {name} is missing",
            subject=name,
            expected="header present",
        )

    def no_header(self, response: HttpResponse, name: str) -> AssertionResult:
        """Assert that header `name` is absent."""
        actual = response.last_header(name)
        if actual is None:
            return AssertionResult.passed_result(
                message=f"Header field {name} is absent",
                subject=name,
            )
        return AssertionResult.failed_result(
            message=f"Header field {name} is present",
            subject=name,
            expected="header absent",
            actual=actual,
        )

    def content(self, response: HttpResponse, expected: str | bytes) -> AssertionResult:
        """Assert that the body equals expected (text or raw bytes)."""
        actual = response.body if isinstance(expected, bytes) else response.text
        if actual == expected:
            return AssertionResult.passed_result(
                message="Content matches expected",
                subject=response.url,
                actual=actual,
            )
        return AssertionResult.failed_result(
            message="Content does not match",
            subject=response.url,
            expected=expected,
            actual=actual,
            details={"length": len(actual)},
        )

    def content_matches(self, response: HttpResponse, pattern: str | re.Pattern) -> AssertionResult:
        """Assert that the whole body matches a regular expression."""
        try:
            regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        except re.error as e:
            return AssertionResult.error_result(
                message="Invalid regular expression",
                subject=str(pattern),
                details={"error": str(e)},
            )

        if regex.fullmatch(response.text):
            return AssertionResult.passed_result(
                message="Content matches pattern",
                subject=regex.pattern,
            )
        return AssertionResult.failed_result(
            message=f"Regex check failed: {regex.pattern}",
            subject=regex.pattern,
            expected=f"content matching {regex.pattern!r}",
            actual=response.text,
        )

    def json_path_exists(self, response: HttpResponse, path: str) -> AssertionResult:
        """Assert that a JSONPath matches something in the JSON body."""
        matches, error = self._evaluate_path(response, path)
        if error:
            return error

        if matches:
            return AssertionResult.passed_result(
                message="Path exists",
                subject=path,
                actual=self._summarize_matches(matches),
            )
        return AssertionResult.failed_result(
            message="Path does not exist",
            subject=path,
            expected="path to exist",
            actual="no matches found",
        )

    def json_path_equals(self, response: HttpResponse, path: str, expected: Any) -> AssertionResult:
        """Assert that the first value at a JSONPath equals expected."""
        matches, error = self._evaluate_path(response, path)
        if error:
            return error

        if not matches:
            return AssertionResult.failed_result(
                message="Path does not exist",
                subject=path,
                expected=expected,
                actual="<path not found>",
            )
        return AssertionResult.compare(matches[0].value, expected, "Value", subject=path)

    def _evaluate_path(
        self, response: HttpResponse, path: str
    ) -> tuple[list, AssertionResult | None]:
        """
        Evaluate a JSONPath expression on the JSON body.

        Returns:
            Tuple of (matches, error). If error is not None, matches is empty.
        """
        try:
            data = response.json()
        except ValueError as e:
            return [], AssertionResult.error_result(
                message="Response body is not valid JSON",
                subject=path,
                details={"error": str(e)},
            )

        try:
            jsonpath_expr = parse_jsonpath(path)
        except JsonPathParserError as e:
            return [], AssertionResult.error_result(
                message="Invalid JSONPath expression",
                subject=path,
                details={"error": str(e)},
            )
        except Exception as e:
            # jsonpath_ng's lexer raises plain exceptions for some inputs
            return [], AssertionResult.error_result(
                message="Failed to parse JSONPath",
                subject=path,
                details={"error": f"{type(e).__name__}: {e}"},
            )

        return jsonpath_expr.find(data), None

    def _summarize_matches(self, matches: list) -> Any:
        if len(matches) == 1:
            return matches[0].value
        return [m.value for m in matches]


# One-shot checks that issue their own GET request
async def check_http_code(client: HttpClient, resource: str, code: int) -> AssertionResult:
    """GET `resource` and check the status code."""
    response = await client.get(resource)
    return HttpAssertions().status(response, code)


async def check_http_ok(client: HttpClient, resource: str) -> AssertionResult:
    return await check_http_code(client, resource, HTTP_OK)


async def check_http_404(client: HttpClient, resource: str) -> AssertionResult:
    return await check_http_code(client, resource, HTTP_NOT_FOUND)


async def check_http_content(
    client: HttpClient,
    resource: str,
    expected: str | bytes | re.Pattern,
) -> AssertionResult:
    """GET `resource`, require status 200, then check the body (text, bytes or regex)."""
    engine = HttpAssertions()
    response = await client.get(resource)
    status = engine.ok(response)
    if not status.passed:
        return status
    if isinstance(expected, re.Pattern):
        return engine.content_matches(response, expected)
    return engine.content(response, expected)


# Raising helpers
def assert_http_ok(response: HttpResponse, message: str | None = None) -> None:
    HttpAssertions().ok(response).raise_for_status(message)


def assert_http_code(response: HttpResponse, code: int, message: str | None = None) -> None:
    HttpAssertions().status(response, code).raise_for_status(message)


def assert_http_header(
    response: HttpResponse, name: str, expected: str, message: str | None = None
) -> None:
    HttpAssertions().header(response, name, expected).raise_for_status(message)


def assert_http_has_header(response: HttpResponse, name: str, message: str | None = None) -> None:
    HttpAssertions().has_header(response, name).raise_for_status(message)


def assert_http_no_header(response: HttpResponse, name: str, message: str | None = None) -> None:
    HttpAssertions().no_header(response, name).raise_for_status(message)


def assert_http_content(
    response: HttpResponse,
    expected: str | bytes | re.Pattern,
    message: str | None = None,
) -> None:
    """Assert the body equals expected, or fully matches it when it is a compiled regex."""
    engine = HttpAssertions()
    if isinstance(expected, re.Pattern):
        result = engine.content_matches(response, expected)
    else:
        result = engine.content(response, expected)
    result.raise_for_status(message)
