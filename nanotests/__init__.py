"""
nanotests - URL parsing and assertion toolkit for server tests

Subpackages:
    - url: Decompose URLs into protocol, domain, resource and parameters
    - http: aiohttp-based client bound to one test host
    - db: Pooled DB-API connections for database checks
    - assertions: URL, HTTP, XML, DB and value assertions
    - suite: Parse and validate YAML check suites
    - reporting: Run reports and result tracking

Usage:
    from nanotests import parse_url, load_suite, run_suite

    url = parse_url("http://test.com/page?a=1")
    assert url.param("a") == "1"

    suite, result = load_suite("checks/site.yaml")
    reporter = asyncio.run(run_suite(suite))
    print(reporter.report.summary())
"""

__version__ = "0.1.0"

from .exceptions import (
    DatabaseError,
    DecodeError,
    HttpClientError,
    NanotestsError,
    XmlDocumentError,
)

from .url import ParsedUrl, parse_url, parse_urls, percent_decode, percent_encode

from .http import HttpClient, HttpRequest, HttpResponse

from .db import ConnectionPool, Database

from .assertions import (
    AssertionResult,
    AssertionStatus,
    DbAssertions,
    HttpAssertions,
    UrlAssertions,
    XmlAssertions,
)

from .suite import (
    Suite,
    ValidationResult,
    load_suite,
    validate_suite_yaml,
)

from .reporting import Reporter, RunReport, RunStatus, StepRecord, StepStatus

from .runner import run_suite

__all__ = [
    "__version__",
    # Errors
    "NanotestsError",
    "DecodeError",
    "HttpClientError",
    "XmlDocumentError",
    "DatabaseError",
    # URL
    "ParsedUrl",
    "parse_url",
    "parse_urls",
    "percent_decode",
    "percent_encode",
    # HTTP
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    # DB
    "ConnectionPool",
    "Database",
    # Assertions
    "AssertionResult",
    "AssertionStatus",
    "DbAssertions",
    "HttpAssertions",
    "UrlAssertions",
    "XmlAssertions",
    # Suites
    "Suite",
    "ValidationResult",
    "load_suite",
    "validate_suite_yaml",
    # Reporting
    "Reporter",
    "RunReport",
    "RunStatus",
    "StepRecord",
    "StepStatus",
    # Runner
    "run_suite",
]
