"""tests/test_runner.py

Running whole suites against an in-process aiohttp server.
"""

import pytest
import yaml
from aiohttp import test_utils

from nanotests.reporting import RunStatus, StepStatus
from nanotests.runner import interpolate_value, run_suite
from nanotests.suite import validate_suite_yaml


def make_suite(url: str, steps: list[dict], **extra):
    data = {
        "version": 1,
        "name": "Runner test",
        "server": {"url": url},
        "defaults": {"timeout_ms": 2000, "follow_redirects": False},
        "steps": steps,
    }
    data.update(extra)
    suite, result = validate_suite_yaml(yaml.safe_dump(data))
    assert result.is_valid, str(result)
    return suite


def base_url(server: test_utils.TestServer) -> str:
    return f"http://{server.host}:{server.port}"


class TestInterpolation:
    """Tests for {{env.X}} interpolation."""

    def test_string(self):
        """Test placeholders in strings are replaced."""
        assert interpolate_value("Bearer {{env.TOKEN}}", {"TOKEN": "t"}) == "Bearer t"

    def test_unknown_name_kept(self):
        """Test unknown placeholders stay as written."""
        assert interpolate_value("{{env.MISSING}}", {}) == "{{env.MISSING}}"

    def test_nested(self):
        """Test dicts and lists are walked."""
        value = {"h": ["{{env.A}}", 1], "n": None}
        assert interpolate_value(value, {"A": 5}) == {"h": ["5", 1], "n": None}


class TestRunSuite:
    """Tests for run_suite()."""

    @pytest.mark.asyncio
    async def test_all_checks_pass(self, app):
        """Test a suite exercising every engine passes end to end."""
        async with test_utils.TestServer(app) as server:
            suite = make_suite(base_url(server), [
                {"id": "home", "type": "request", "resource": "/ok"},
                {"id": "home_ok", "type": "assert", "from": "home",
                 "check": {"op": "status_eq", "value": 200}},
                {"id": "home_body", "type": "assert", "from": "home",
                 "check": {"op": "body_eq", "value": "hello"}},
                {"id": "home_re", "type": "assert", "from": "home",
                 "check": {"op": "body_matches", "value": "h.*o"}},
                {"id": "home_type", "type": "assert", "from": "home",
                 "check": {"op": "header_exists", "name": "Content-Type"}},
                {"id": "home_no_loc", "type": "assert", "from": "home",
                 "check": {"op": "header_absent", "name": "Location"}},
                {"id": "items", "type": "request", "resource": "/json"},
                {"id": "items_total", "type": "assert", "from": "items",
                 "check": {"op": "jsonpath_eq", "path": "$.total", "value": 2}},
                {"id": "items_name", "type": "assert", "from": "items",
                 "check": {"op": "jsonpath_exists", "path": "$.items[0].name"}},
                {"id": "catalog", "type": "request", "resource": "/xml"},
                {"id": "catalog_title", "type": "assert", "from": "catalog",
                 "check": {"op": "xpath_text_eq", "path": "/catalog/book/title", "value": "Dune"}},
                {"id": "catalog_root", "type": "assert", "from": "catalog",
                 "check": {"op": "xpath_name_eq", "path": "/*", "value": "catalog"}},
                {"id": "catalog_count", "type": "assert", "from": "catalog",
                 "check": {"op": "xpath_count_eq", "path": "//book", "value": 2}},
                {"id": "moved", "type": "request", "resource": "/redirect"},
                {"id": "moved_status", "type": "assert", "from": "moved",
                 "check": {"op": "status_eq", "value": 302}},
                {"id": "moved_protocol", "type": "assert", "from": "moved",
                 "check": {"op": "url_protocol_eq", "value": "http"}},
                {"id": "moved_domain", "type": "assert", "from": "moved",
                 "check": {"op": "url_domain_eq", "value": "other.example"}},
                {"id": "moved_resource", "type": "assert", "from": "moved",
                 "check": {"op": "url_resource_eq", "value": "/landing"}},
                {"id": "moved_param", "type": "assert", "from": "moved",
                 "check": {"op": "url_param_eq", "name": "q", "value": "a b"}},
                {"id": "literal", "type": "assert",
                 "check": {"op": "url_has_param", "url": "http://test.com/p?x=1", "name": "x"}},
            ])
            reporter = await run_suite(suite)

        report = reporter.report
        failures = [(s.step_id, s.failure_message or s.error_message)
                    for s in report.steps if s.status != StepStatus.PASSED]
        assert failures == []
        assert report.status == RunStatus.PASSED
        assert report.total_steps == 20
        assert report.get_step("home").status_code == 200

    @pytest.mark.asyncio
    async def test_failed_check(self, app):
        """Test a failing check fails the run."""
        async with test_utils.TestServer(app) as server:
            suite = make_suite(base_url(server), [
                {"id": "home", "type": "request", "resource": "/ok"},
                {"id": "home_404", "type": "assert", "from": "home",
                 "check": {"op": "status_eq", "value": 404}},
            ])
            reporter = await run_suite(suite)

        report = reporter.report
        step = report.get_step("home_404")
        assert step.status == StepStatus.FAILED
        assert step.expected_value == 404
        assert step.actual_value == 200
        assert report.status == RunStatus.FAILED

    @pytest.mark.asyncio
    async def test_error_check(self, app):
        """Test a check that cannot be evaluated errors the run."""
        async with test_utils.TestServer(app) as server:
            suite = make_suite(base_url(server), [
                {"id": "items", "type": "request", "resource": "/json"},
                {"id": "items_xml", "type": "assert", "from": "items",
                 "check": {"op": "xpath_count_eq", "path": "//a", "value": 1}},
                {"id": "bad_url", "type": "assert",
                 "check": {"op": "url_param_eq", "url": "http://t/p?a=%ZZ", "name": "a", "value": "1"}},
            ])
            reporter = await run_suite(suite)

        report = reporter.report
        assert report.get_step("items_xml").status == StepStatus.ERROR
        assert report.get_step("items_xml").error_message == "Response body is not an XML document"
        assert report.get_step("bad_url").error_message == "Failed to decode URL"
        assert report.status == RunStatus.ERROR

    @pytest.mark.asyncio
    async def test_missing_location_header_fails(self, app):
        """Test a URL check on a response without the header fails."""
        async with test_utils.TestServer(app) as server:
            suite = make_suite(base_url(server), [
                {"id": "home", "type": "request", "resource": "/ok"},
                {"id": "loc", "type": "assert", "from": "home",
                 "check": {"op": "url_domain_eq", "value": "x"}},
            ])
            reporter = await run_suite(suite)

        step = reporter.report.get_step("loc")
        assert step.status == StepStatus.FAILED
        assert step.failure_message == "Response has no Location header"

    @pytest.mark.asyncio
    async def test_env_interpolation_and_auth(self, app):
        """Test env values reach auth headers, resources and bodies."""
        async with test_utils.TestServer(app) as server:
            suite = make_suite(
                base_url(server),
                [
                    {"id": "who", "type": "request", "resource": "/headers"},
                    {"id": "who_auth", "type": "assert", "from": "who",
                     "check": {"op": "jsonpath_eq", "path": "$.Authorization",
                               "value": "Bearer {{env.TOKEN}}"}},
                    {"id": "echo", "type": "request", "resource": "/echo", "method": "POST",
                     "body": "token={{env.TOKEN}}"},
                    {"id": "echo_body", "type": "assert", "from": "echo",
                     "check": {"op": "body_eq", "value": "token=s3cret"}},
                ],
                env={"TOKEN": "s3cret"},
                server={"url": base_url(server), "auth": {"type": "bearer", "token": "{{env.TOKEN}}"}},
            )
            reporter = await run_suite(suite)

        assert reporter.report.status == RunStatus.PASSED

    @pytest.mark.asyncio
    async def test_unreachable_server(self):
        """Test connection errors become error steps and dependent checks error too."""
        suite = make_suite("http://127.0.0.1:1", [
            {"id": "home", "type": "request", "resource": "/"},
            {"id": "home_ok", "type": "assert", "from": "home",
             "check": {"op": "status_eq", "value": 200}},
        ])
        reporter = await run_suite(suite)

        report = reporter.report
        assert report.get_step("home").status == StepStatus.ERROR
        assert report.get_step("home_ok").error_message == "Source step 'home' has no response"
        assert report.status == RunStatus.ERROR
        assert report.error_steps == 2
