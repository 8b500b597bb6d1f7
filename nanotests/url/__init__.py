"""
URL decomposition.

Usage:
    from nanotests.url import parse_url

    url = parse_url("http://test.com/page?a=1&b=2")
    if url.has_param("a"):
        print(url.param("a"))
"""

from ..exceptions import DecodeError
from .parser import (
    ParsedUrl,
    parse_url,
    parse_urls,
    percent_decode,
    percent_encode,
)

__all__ = [
    "DecodeError",
    "ParsedUrl",
    "parse_url",
    "parse_urls",
    "percent_decode",
    "percent_encode",
]
