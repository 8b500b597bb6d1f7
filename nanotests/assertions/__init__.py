"""
Assertions for server tests.

Every engine method returns an AssertionResult instead of raising, so a
runner can record failures and carry on. The assert_* helpers raise
AssertionError for anything but a pass and are meant for plain pytest
tests.

Engines:
    - UrlAssertions: protocol, domain, resource and query parameters of a URL
    - HttpAssertions: status, headers, body and JSONPath checks on a response
    - XmlAssertions: element text, name and count selected by path
    - DbAssertions: query results and single fields of table rows

Usage:
    from nanotests.assertions import UrlAssertions, assert_url_param

    result = UrlAssertions().param("http://test.com/?a=1", "a", "1")
    if not result.passed:
        print(result)

    assert_url_param("http://test.com/?a=1", "a", "1")
"""

from .models import AssertionResult, AssertionStatus

from .db import (
    DbAssertions,
    assert_last_row,
    assert_query_empty,
    assert_query_not_empty,
    assert_row,
)
from .http import (
    HTTP_NOT_FOUND,
    HTTP_OK,
    HttpAssertions,
    assert_http_code,
    assert_http_content,
    assert_http_has_header,
    assert_http_header,
    assert_http_no_header,
    assert_http_ok,
    check_http_404,
    check_http_code,
    check_http_content,
    check_http_ok,
)
from .url import (
    UrlAssertions,
    assert_url_domain,
    assert_url_has_param,
    assert_url_param,
    assert_url_protocol,
    assert_url_resource,
)
from .values import (
    assert_dates_equal,
    assert_in_set,
    assert_not_equal,
    dates_equal,
    in_set,
    not_equal,
)
from .xml import (
    XmlAssertions,
    XmlDocument,
    assert_element_content,
    assert_element_name,
    assert_elements_count,
    load_document,
)

__all__ = [
    # Models
    "AssertionResult",
    "AssertionStatus",
    # Engines
    "DbAssertions",
    "HttpAssertions",
    "UrlAssertions",
    "XmlAssertions",
    "XmlDocument",
    "load_document",
    # HTTP shortcuts
    "HTTP_OK",
    "HTTP_NOT_FOUND",
    "check_http_code",
    "check_http_ok",
    "check_http_404",
    "check_http_content",
    # Value checks
    "dates_equal",
    "not_equal",
    "in_set",
    # Raising helpers
    "assert_dates_equal",
    "assert_element_content",
    "assert_element_name",
    "assert_elements_count",
    "assert_http_code",
    "assert_http_content",
    "assert_http_has_header",
    "assert_http_header",
    "assert_http_no_header",
    "assert_http_ok",
    "assert_in_set",
    "assert_last_row",
    "assert_not_equal",
    "assert_query_empty",
    "assert_query_not_empty",
    "assert_row",
    "assert_url_domain",
    "assert_url_has_param",
    "assert_url_param",
    "assert_url_protocol",
    "assert_url_resource",
]
