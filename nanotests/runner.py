"""
Suite runner.

Executes the steps of a parsed Suite in order against its server and
records every outcome in a RunReport.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

from rich.console import Console
from rich.markup import escape

from .assertions import AssertionResult, HttpAssertions, UrlAssertions, XmlAssertions
from .assertions.xml import load_document
from .exceptions import HttpClientError, XmlDocumentError
from .http import HttpClient, HttpRequest, HttpResponse
from .reporting import Reporter
from .suite import AssertCheck, AssertOp, AssertStep, AuthConfig, RequestStep, Suite

logger = logging.getLogger(__name__)

ENV_PATTERN = re.compile(r"\{\{env\.(\w+)\}\}")


def interpolate_value(value: Any, env: dict[str, Any]) -> Any:
    """
    Replace {{env.NAME}} placeholders in strings, recursing into dicts
    and lists. Unknown names are left untouched.
    """
    if isinstance(value, str):
        return ENV_PATTERN.sub(lambda m: str(env.get(m.group(1), m.group(0))), value)
    elif isinstance(value, dict):
        return {k: interpolate_value(v, env) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_value(v, env) for v in value]
    return value


def interpolate_auth_config(auth: AuthConfig | None, env: dict[str, Any]) -> AuthConfig | None:
    if auth is None:
        return None
    return AuthConfig(
        type=auth.type,
        token=interpolate_value(auth.token, env),
        header=auth.header,
        key=interpolate_value(auth.key, env),
        username=interpolate_value(auth.username, env),
        password=interpolate_value(auth.password, env),
    )


class SuiteRunner:
    """
    Runs one suite through a single HttpClient session.

    Responses of request steps are kept by step id so that later assert
    steps can refer to them with 'from'.
    """

    def __init__(self, suite: Suite, console: Console | None = None):
        self.suite = suite
        self.console = console
        self.reporter = Reporter.from_suite(suite)
        self.responses: dict[str, HttpResponse] = {}
        self.http = HttpAssertions()
        self.urls = UrlAssertions()
        self.xml = XmlAssertions()

    def _print(self, message: str) -> None:
        if self.console is not None:
            self.console.print(message)

    async def run(self) -> Reporter:
        suite = self.suite
        client = HttpClient(
            host_url=interpolate_value(suite.server.url, suite.env),
            auth_config=interpolate_auth_config(suite.server.auth, suite.env),
            timeout_ms=suite.defaults.timeout_ms,
            follow_redirects=suite.defaults.follow_redirects,
        )

        logger.info(f"Running suite '{suite.name}' ({len(suite.steps)} steps) against {client.host_url}")
        self.reporter.start_run()
        try:
            async with client:
                for step in suite.steps:
                    await self._run_step(client, step)
                    if step.delay_ms:
                        await asyncio.sleep(step.delay_ms / 1000)
        finally:
            self.reporter.finish_run()

        report = self.reporter.report
        logger.info(
            f"Suite '{suite.name}' finished: {report.status.value} "
            f"({report.passed_steps}/{report.total_steps} passed)"
        )
        return self.reporter

    async def _run_step(self, client: HttpClient, step: RequestStep | AssertStep) -> None:
        self.reporter.start_step(step.id)
        try:
            if isinstance(step, RequestStep):
                await self._run_request(client, step)
            else:
                self._run_assert(step)
        except Exception as e:
            logger.warning(f"Step '{step.id}' raised {type(e).__name__}: {e}")
            self.reporter.complete_step_error(step.id, f"{type(e).__name__}: {e}")
            self._print(f"  [red]ERROR[/red] {step.id}: {type(e).__name__}: {escape(str(e))}")

    async def _run_request(self, client: HttpClient, step: RequestStep) -> None:
        env = self.suite.env
        request = HttpRequest(
            resource=interpolate_value(step.resource, env),
            method=step.method,
        )
        for name, value in interpolate_value(step.headers, env).items():
            request.set_header(name, value)
        if step.body is not None:
            request.set_content(interpolate_value(step.body, env))

        try:
            response = await client.execute(request)
        except HttpClientError as e:
            self.reporter.complete_step_error(step.id, str(e), {"url": e.url})
            self._print(f"  [red]ERROR[/red] {step.id}: {escape(str(e))}")
            return

        self.responses[step.id] = response
        self.reporter.complete_step_success(step.id, status_code=response.status)
        self._print(f"  [green]DONE[/green] {step.id}: {request.method} {request.resource} -> {response.status}")

    def _run_assert(self, step: AssertStep) -> None:
        check = step.check
        response = self.responses.get(step.from_step) if step.from_step else None
        if step.from_step and response is None:
            self.reporter.complete_step_error(
                step.id,
                f"Source step '{step.from_step}' has no response",
            )
            self._print(f"  [red]ERROR[/red] {step.id}: no response from step '{step.from_step}'")
            return

        result = self.evaluate(check, response)

        if result.passed:
            self.reporter.complete_step_success(step.id, actual_value=result.actual)
            self._print(f"  [green]PASS[/green] {step.id}: {escape(result.message)}")
        elif result.failed:
            self.reporter.complete_step_failure(
                step.id,
                failure_message=result.message,
                expected_value=result.expected,
                actual_value=result.actual,
            )
            self._print(f"  [red]FAIL[/red] {step.id}: {escape(result.message)}")
        else:
            self.reporter.complete_step_error(step.id, result.message, result.details or None)
            self._print(f"  [red]ERROR[/red] {step.id}: {escape(result.message)}")

    def evaluate(self, check: AssertCheck, response: HttpResponse | None) -> AssertionResult:
        """Dispatch a check to the engine that handles its operator."""
        op = check.op
        value = interpolate_value(check.value, self.suite.env)

        if op.is_url_op:
            return self._evaluate_url(check, value, response)

        if op == AssertOp.STATUS_EQ:
            return self.http.status(response, value)
        if op == AssertOp.HEADER_EQ:
            return self.http.header(response, check.name, str(value))
        if op == AssertOp.HEADER_EXISTS:
            return self.http.has_header(response, check.name)
        if op == AssertOp.HEADER_ABSENT:
            return self.http.no_header(response, check.name)
        if op == AssertOp.BODY_EQ:
            return self.http.content(response, str(value))
        if op == AssertOp.BODY_MATCHES:
            return self.http.content_matches(response, str(value))
        if op == AssertOp.JSONPATH_EXISTS:
            return self.http.json_path_exists(response, check.path)
        if op == AssertOp.JSONPATH_EQ:
            return self.http.json_path_equals(response, check.path, value)

        try:
            doc = load_document(response.body)
        except XmlDocumentError as e:
            return AssertionResult.error_result(
                message="Response body is not an XML document",
                subject=response.url,
                details={"error": str(e)},
            )
        if op == AssertOp.XPATH_TEXT_EQ:
            return self.xml.element_content(doc, check.path, str(value))
        if op == AssertOp.XPATH_NAME_EQ:
            return self.xml.element_name(doc, check.path, str(value))
        if op == AssertOp.XPATH_COUNT_EQ:
            return self.xml.elements_count(doc, check.path, value)

        return AssertionResult.error_result(message=f"Unknown assertion op: {op.value}")

    def _evaluate_url(
        self, check: AssertCheck, value: Any, response: HttpResponse | None
    ) -> AssertionResult:
        if check.url:
            url = interpolate_value(check.url, self.suite.env)
        elif response is not None:
            url = response.last_header(check.header)
            if url is None:
                return AssertionResult.failed_result(
                    message=f"Response has no {check.header} header",
                    subject=response.url,
                    expected=f"a URL in {check.header}",
                    actual="<absent>",
                )
        else:
            return AssertionResult.error_result(message="No URL to check: set 'url' or 'from'")

        expected = None if value is None else str(value)
        op = check.op
        if op == AssertOp.URL_PROTOCOL_EQ:
            return self.urls.protocol(url, expected)
        if op == AssertOp.URL_DOMAIN_EQ:
            return self.urls.domain(url, expected)
        if op == AssertOp.URL_RESOURCE_EQ:
            return self.urls.resource(url, expected)
        if op == AssertOp.URL_PARAM_EQ:
            return self.urls.param(url, check.name, expected)
        return self.urls.has_param(url, check.name)


async def run_suite(suite: Suite, console: Console | None = None) -> Reporter:
    """
    Execute a suite and return the reporter with results.

    Args:
        suite: A parsed, validated suite
        console: If given, step progress is printed to it

    Returns:
        Reporter whose report is complete
    """
    return await SuiteRunner(suite, console).run()
