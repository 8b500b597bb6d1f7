"""
Exception hierarchy for nanotests.

Check outcomes are never reported through exceptions; engines return
AssertionResult objects. These exceptions cover failures of the
collaborators the checks run against (URL decoding, HTTP, XML, SQL).
"""

from __future__ import annotations


class NanotestsError(Exception):
    """Base exception for all nanotests errors."""


class DecodeError(NanotestsError, ValueError):
    """
    Percent-decoding of a URL parameter name or value failed.

    Attributes:
        raw: The raw (still encoded) substring that could not be decoded
        reason: Why decoding failed
    """

    def __init__(self, raw: str, reason: str):
        super().__init__(f"Cannot decode {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class HttpClientError(NanotestsError):
    """An HTTP request could not be completed (connection, timeout, protocol)."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class XmlDocumentError(NanotestsError):
    """XML content could not be parsed into a document."""


class DatabaseError(NanotestsError):
    """A SQL statement failed or a connection could not be opened."""

    def __init__(self, message: str, sql: str | None = None):
        super().__init__(message)
        self.sql = sql
