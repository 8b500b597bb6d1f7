"""
XML document assertions.

Documents are parsed with xml.etree.ElementTree and queried with its
XPath subset. Paths are evaluated from the document node, so both
"/catalog/book" and "catalog/book" select the <book> children of a
<catalog> root, and "//book" selects every <book> in the document. A
trailing "/@name" step selects an attribute value.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ..exceptions import XmlDocumentError
from .models import AssertionResult


class XmlDocument:
    """A parsed XML document with path queries relative to the document node."""

    def __init__(self, root: ET.Element):
        self.root = root
        # Synthetic document node so that the root element is selectable by name
        self._node = ET.Element("document")
        self._node.append(root)

    def select(self, path: str) -> list[ET.Element]:
        """
        Select elements matching a path.

        Raises:
            SyntaxError: If ElementTree rejects the path
            KeyError: If the path uses an unknown namespace prefix
        """
        if path.startswith("/"):
            path = "." + path
        return self._node.findall(path)

    def text(self, path: str) -> str | None:
        """String value of the first match: element text content or attribute value."""
        head, sep, attribute = path.rpartition("/@")
        if sep:
            elements = self.select(head)
            return elements[0].get(attribute) if elements else None

        elements = self.select(path)
        if not elements:
            return None
        return "".join(elements[0].itertext())


def load_document(content: str | bytes) -> XmlDocument:
    """
    Parse XML text into a document.

    Raises:
        XmlDocumentError: If the content is not well-formed XML
    """
    try:
        return XmlDocument(ET.fromstring(content))
    except ET.ParseError as e:
        raise XmlDocumentError(f"XML parsing error: {e}") from e


class XmlAssertions:
    """
    Engine for checks on XML documents.

    Example:
        doc = load_document("<catalog><book id='1'>Dune</book></catalog>")
        engine = XmlAssertions()
        engine.element_content(doc, "/catalog/book", "Dune")
        engine.element_content(doc, "/catalog/book/@id", "1")
        engine.elements_count(doc, "//book", 1)
    """

    def element_content(self, doc: XmlDocument, path: str, expected: str) -> AssertionResult:
        """Assert that the text content of the first match equals expected."""
        try:
            actual = doc.text(path)
        except (SyntaxError, KeyError) as e:
            return self._path_error(path, e)

        if actual is None:
            return AssertionResult.failed_result(
                message="No element matches path",
                subject=path,
                expected=expected,
                actual="<no match>",
            )
        return AssertionResult.compare(actual, expected, "Element content", subject=path)

    def element_name(self, doc: XmlDocument, path: str, expected: str) -> AssertionResult:
        """Assert that the tag name of the first match equals expected."""
        try:
            elements = doc.select(path)
        except (SyntaxError, KeyError) as e:
            return self._path_error(path, e)

        if not elements:
            return AssertionResult.failed_result(
                message="No element matches path",
                subject=path,
                expected=expected,
                actual="<no match>",
            )
        return AssertionResult.compare(elements[0].tag, expected, "Element name", subject=path)

    def elements_count(self, doc: XmlDocument, path: str, expected_count: int) -> AssertionResult:
        """Assert the number of elements matching a path."""
        try:
            elements = doc.select(path)
        except (SyntaxError, KeyError) as e:
            return self._path_error(path, e)

        if len(elements) == expected_count:
            return AssertionResult.passed_result(
                message=f"Path matches {expected_count} element(s)",
                subject=path,
                actual=len(elements),
            )
        return AssertionResult.failed_result(
            message="Element count mismatch",
            subject=path,
            expected=expected_count,
            actual=len(elements),
            details={"difference": abs(len(elements) - expected_count)},
        )

    def _path_error(self, path: str, error: Exception) -> AssertionResult:
        return AssertionResult.error_result(
            message="XPath parsing error",
            subject=path,
            details={"error": f"{type(error).__name__}: {error}"},
        )


# Raising helpers
def assert_element_content(
    doc: XmlDocument, path: str, expected: str, message: str | None = None
) -> None:
    XmlAssertions().element_content(doc, path, expected).raise_for_status(message)


def assert_element_name(
    doc: XmlDocument, path: str, expected: str, message: str | None = None
) -> None:
    XmlAssertions().element_name(doc, path, expected).raise_for_status(message)


def assert_elements_count(
    doc: XmlDocument, path: str, expected_count: int, message: str | None = None
) -> None:
    XmlAssertions().elements_count(doc, path, expected_count).raise_for_status(message)
