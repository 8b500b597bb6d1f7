"""
URL decomposition for URL assertions.

Splits a URL string into protocol, domain, resource and query parameters
with a single left-to-right scan. Missing delimiters are not errors: the
scan stops and the remaining parts stay unset. The only failure is a
parameter name or value that cannot be percent-decoded.

Example:
    url = parse_url("http://test.com/page?name=John%20Doe")
    url.protocol            # "http"
    url.domain              # "test.com"
    url.resource            # "/page"
    url.param("name")       # "John Doe"
    url.has_param("other")  # False
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping
from urllib.parse import quote_plus, unquote_to_bytes

from ..exceptions import DecodeError

SCHEME_DELIMITER = "://"

# A '%' that does not start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def percent_decode(raw: str) -> str:
    """
    Decode a form-encoded URL component.

    '+' becomes a space and every %XX escape becomes one byte; the bytes
    are then reassembled as UTF-8.

    Raises:
        DecodeError: If an escape is malformed or the bytes are not UTF-8
    """
    bad = _BAD_ESCAPE.search(raw)
    if bad:
        raise DecodeError(raw, f"malformed escape at offset {bad.start()}")

    try:
        data = unquote_to_bytes(raw.replace("+", " "))
    except UnicodeEncodeError as e:
        raise DecodeError(raw, f"text is not encodable as UTF-8 ({e.reason})") from e
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(raw, f"invalid UTF-8 sequence ({e.reason})") from e


def percent_encode(value: str) -> str:
    """Form-encode a parameter name or value (inverse of percent_decode)."""
    return quote_plus(value, safe="")


@dataclass(frozen=True)
class ParsedUrl:
    """
    Read-only decomposition of a URL.

    Attributes:
        domain: Host[:port] segment
        protocol: Scheme before '://', or None when the URL has none
        resource: Path segment without the query string, or None when the
            URL has no '/' after the domain
        params: Decoded query parameters (last duplicate wins)
    """
    domain: str
    protocol: str | None = None
    resource: str | None = None
    params: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def param(self, name: str) -> str | None:
        """Get the decoded value of a parameter, or None if absent."""
        return self.params.get(name)

    def has_param(self, name: str) -> bool:
        """Check whether the URL carries a parameter with this name."""
        return name in self.params

    def to_url(self) -> str:
        """Serialize back to a URL string, re-encoding the parameters."""
        parts = []
        if self.protocol is not None:
            parts.append(self.protocol + SCHEME_DELIMITER)
        parts.append(self.domain)
        if self.resource is not None:
            parts.append(self.resource)
            if self.params:
                query = "&".join(
                    f"{percent_encode(name)}={percent_encode(value)}"
                    for name, value in self.params.items()
                )
                parts.append("?" + query)
        return "".join(parts)


def parse_url(url: str) -> ParsedUrl:
    """
    Decompose a URL into protocol, domain, resource and parameters.

    Args:
        url: The URL to parse. Schemeless and domain-only URLs are accepted.

    Returns:
        ParsedUrl with the parts that were found

    Raises:
        DecodeError: If a parameter name or value cannot be decoded
    """
    protocol = None
    i = url.find(SCHEME_DELIMITER)
    if i != -1:
        protocol = url[:i]
        i += len(SCHEME_DELIMITER)
    else:
        i = 0

    j = url.find("/", i)
    if j == -1:
        return ParsedUrl(domain=url[i:], protocol=protocol)
    domain = url[i:j]
    i = j

    j = url.find("?", i)
    if j == -1:
        return ParsedUrl(domain=domain, protocol=protocol, resource=url[i:])
    resource = url[i:j]
    i = j + 1

    params: dict[str, str] = {}
    end = len(url)
    while i < end:
        j = url.find("=", i)
        if j == -1:
            # trailing fragment without '=' is dropped
            break
        name = percent_decode(url[i:j])
        i = j + 1

        j = url.find("&", i)
        if j == -1:
            j = end
        params[name] = percent_decode(url[i:j])
        i = j + 1

    return ParsedUrl(domain=domain, protocol=protocol, resource=resource, params=params)


def parse_urls(urls: Iterable[str]) -> list[ParsedUrl]:
    """Parse several URLs in order; the first DecodeError aborts the batch."""
    return [parse_url(url) for url in urls]
