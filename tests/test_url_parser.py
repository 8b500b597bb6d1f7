"""tests/test_url_parser.py"""

import dataclasses

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from nanotests.url import (
    DecodeError,
    ParsedUrl,
    parse_url,
    parse_urls,
    percent_decode,
    percent_encode,
)


class TestParseUrlStructure:
    """Tests for splitting a URL into its parts."""

    def test_domain_only(self):
        """A bare domain has no protocol, resource or params."""
        url = parse_url("test.com")
        assert url.protocol is None
        assert url.domain == "test.com"
        assert url.resource is None
        assert dict(url.params) == {}

    def test_protocol_domain_resource(self):
        """Test a URL with protocol and path but no query."""
        url = parse_url("http://test.com/page")
        assert url.protocol == "http"
        assert url.domain == "test.com"
        assert url.resource == "/page"
        assert dict(url.params) == {}

    def test_full_url_with_params(self):
        """Test a URL with every part present."""
        url = parse_url("http://test.com/page?a=1&b=2")
        assert url.protocol == "http"
        assert url.domain == "test.com"
        assert url.resource == "/page"
        assert dict(url.params) == {"a": "1", "b": "2"}

    def test_schemeless_with_path(self):
        """Without '://' the domain starts at the beginning."""
        url = parse_url("test.com/a/b?x=1")
        assert url.protocol is None
        assert url.domain == "test.com"
        assert url.resource == "/a/b"
        assert url.param("x") == "1"

    def test_domain_keeps_port(self):
        """Test that host:port stays together as the domain."""
        url = parse_url("https://localhost:8080/api")
        assert url.protocol == "https"
        assert url.domain == "localhost:8080"
        assert url.resource == "/api"

    def test_protocol_without_path(self):
        """Test protocol and domain without a trailing slash."""
        url = parse_url("ftp://files.example.org")
        assert url.protocol == "ftp"
        assert url.domain == "files.example.org"
        assert url.resource is None

    def test_root_resource(self):
        """Test that a lone slash is the resource."""
        assert parse_url("http://test.com/").resource == "/"

    def test_empty_query(self):
        """A '?' with nothing after it gives no params."""
        url = parse_url("http://test.com/page?")
        assert url.resource == "/page"
        assert dict(url.params) == {}

    def test_empty_string(self):
        """An empty URL is an empty domain, not an error."""
        url = parse_url("")
        assert url.domain == ""
        assert url.protocol is None

    def test_question_mark_before_slash_is_part_of_domain(self):
        """The query is only looked for after the resource starts."""
        url = parse_url("http://test.com?a=1")
        assert url.domain == "test.com?a=1"
        assert url.resource is None
        assert not url.has_param("a")


class TestParseUrlParams:
    """Tests for query parameter parsing."""

    def test_duplicate_param_last_wins(self):
        """Test that a repeated name keeps the last value."""
        url = parse_url("http://test.com/?a=1&a=2")
        assert url.param("a") == "2"

    def test_percent_encoded_value(self):
        """Test %XX escapes are decoded."""
        url = parse_url("http://test.com/page?name=John%20Doe")
        assert url.param("name") == "John Doe"

    def test_plus_is_space(self):
        """Test form-encoding '+' is decoded to a space."""
        assert parse_url("http://t/p?q=a+b").param("q") == "a b"

    def test_encoded_name(self):
        """Parameter names are decoded as well."""
        url = parse_url("http://t/p?first%20name=Ann")
        assert url.param("first name") == "Ann"

    def test_multibyte_utf8(self):
        """Test that multi-byte escapes decode as UTF-8."""
        assert parse_url("http://t/p?city=Z%C3%BCrich").param("city") == "Zürich"

    def test_empty_value(self):
        """Test name with '=' but nothing after it."""
        url = parse_url("http://t/p?a=&b=2")
        assert url.param("a") == ""
        assert url.param("b") == "2"

    def test_empty_name(self):
        """Test '=' with no name before it."""
        assert parse_url("http://t/p?=1").param("") == "1"

    def test_trailing_ampersand(self):
        """Test that a trailing '&' adds nothing."""
        assert dict(parse_url("http://t/p?a=1&").params) == {"a": "1"}

    def test_trailing_fragment_without_equals_is_dropped(self):
        """Test that a final name without '=' is ignored."""
        url = parse_url("http://t/p?a=1&flag")
        assert dict(url.params) == {"a": "1"}
        assert not url.has_param("flag")

    def test_bare_name_merges_into_next_name(self):
        """A name without '=' runs up to the next '='."""
        url = parse_url("http://t/p?flag&a=1")
        assert dict(url.params) == {"flag&a": "1"}

    def test_value_may_contain_equals(self):
        """Only the first '=' separates name and value."""
        assert parse_url("http://t/p?expr=a=b").param("expr") == "a=b"

    def test_missing_param(self):
        """Test lookups of an absent name."""
        url = parse_url("http://t/p?a=1")
        assert url.param("b") is None
        assert not url.has_param("b")
        assert url.has_param("a")


class TestDecoding:
    """Tests for strict percent-decoding."""

    def test_invalid_escape_raises(self):
        """Test that a non-hex escape is a DecodeError."""
        with pytest.raises(DecodeError) as exc_info:
            parse_url("http://test.com/page?a=%ZZ")
        assert exc_info.value.raw == "%ZZ"

    def test_truncated_escape_raises(self):
        """Test a '%' at the end of a value."""
        with pytest.raises(DecodeError):
            parse_url("http://t/p?a=100%")

    def test_invalid_escape_in_name_raises(self):
        """Test that names are decoded strictly too."""
        with pytest.raises(DecodeError) as exc_info:
            parse_url("http://t/p?b%G1d=1")
        assert exc_info.value.raw == "b%G1d"

    def test_invalid_utf8_raises(self):
        """Test a lone Latin-1 byte that is not valid UTF-8."""
        with pytest.raises(DecodeError) as exc_info:
            parse_url("http://t/p?name=Jos%E9")
        assert "UTF-8" in exc_info.value.reason

    def test_lone_surrogate_raises_decode_error(self):
        """Test text that cannot be encoded as UTF-8 is a DecodeError too."""
        with pytest.raises(DecodeError) as exc_info:
            parse_url("http://t/p?a=\ud800")
        assert exc_info.value.raw == "\ud800"

    def test_percent_decode_rejects_surrogate(self):
        """Test percent_decode itself raises DecodeError for a surrogate."""
        with pytest.raises(DecodeError):
            percent_decode("x\udfff")

    def test_decode_error_is_value_error(self):
        """DecodeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            percent_decode("%%")

    def test_encode_decode_inverse(self):
        """Test percent_encode output decodes back to the input."""
        for value in ["a b", "x&y=z", "100%", "Zürich", "+plus+", "/path?"]:
            assert percent_decode(percent_encode(value)) == value

    def test_encode_is_form_style(self):
        """Spaces become '+', reserved characters are escaped."""
        assert percent_encode("a b&c") == "a+b%26c"


class TestParsedUrl:
    """Tests for the ParsedUrl value object."""

    def test_is_frozen(self):
        """Test attributes cannot be reassigned."""
        url = parse_url("http://test.com/page")
        with pytest.raises(dataclasses.FrozenInstanceError):
            url.domain = "other.com"

    def test_params_are_read_only(self):
        """Test the params mapping cannot be mutated."""
        url = parse_url("http://t/p?a=1")
        with pytest.raises(TypeError):
            url.params["a"] = "2"

    def test_constructor_copies_params(self):
        """Test later changes to the source dict are not visible."""
        source = {"a": "1"}
        url = ParsedUrl(domain="t", protocol="http", resource="/", params=source)
        source["a"] = "2"
        assert url.param("a") == "1"

    def test_to_url_round_trip(self):
        """Test that re-serialized URLs parse back to the same parts."""
        for raw in [
            "test.com",
            "http://test.com/page",
            "http://test.com/page?name=John%20Doe&x=a%26b",
            "https://h:1/r?k=Z%C3%BCrich",
        ]:
            parsed = parse_url(raw)
            again = parse_url(parsed.to_url())
            assert again.protocol == parsed.protocol
            assert again.domain == parsed.domain
            assert again.resource == parsed.resource
            assert dict(again.params) == dict(parsed.params)

    def test_to_url_encodes_params(self):
        """Test params are form-encoded on output."""
        url = ParsedUrl(domain="t", protocol="http", resource="/p", params={"n": "a b"})
        assert url.to_url() == "http://t/p?n=a+b"


protocols = st.from_regex(r"[a-z][a-z0-9+.-]{0,8}", fullmatch=True)
domains = st.from_regex(r"[a-z0-9.-]{1,20}(:[0-9]{1,5})?", fullmatch=True)
resources = st.from_regex(r"/[A-Za-z0-9/._~-]{0,20}", fullmatch=True)
params = st.dictionaries(st.text(max_size=12), st.text(max_size=12), max_size=5)
url_like_text = st.text(alphabet=st.sampled_from(list("ab9:/?&=%+2F é")), max_size=40)


def parts(url: ParsedUrl) -> tuple:
    return url.protocol, url.domain, url.resource, dict(url.params)


class TestParseUrlProperties:
    """Property tests for parse_url() and to_url()."""

    @given(protocol=protocols, domain=domains, resource=resources, params=params)
    def test_to_url_round_trip(self, protocol, domain, resource, params):
        """Test parsing a serialized URL gives back its parts."""
        url = ParsedUrl(domain=domain, protocol=protocol, resource=resource, params=params)
        assert parts(parse_url(url.to_url())) == parts(url)

    @given(domain=domains, resource=resources, params=params)
    def test_schemeless_round_trip(self, domain, resource, params):
        """Test the round trip holds without a protocol as well."""
        url = ParsedUrl(domain=domain, resource=resource, params=params)
        again = parse_url(url.to_url())
        assert again.protocol is None
        assert parts(again) == parts(url)

    @given(raw=url_like_text)
    def test_reparsing_serialized_url_is_stable(self, raw):
        """Test parse, serialize, parse again yields the first parse."""
        try:
            first = parse_url(raw)
        except DecodeError:
            assume(False)
        assert parts(parse_url(first.to_url())) == parts(first)

    @given(value=st.text())
    def test_encode_decode_inverse(self, value):
        """Test percent_encode output always decodes back to the input."""
        assert percent_decode(percent_encode(value)) == value


class TestParseUrls:
    """Tests for parse_urls()."""

    def test_keeps_order(self):
        """Test results come back in input order."""
        urls = parse_urls(["http://a.com/", "b.com", "http://c.com/x?y=1"])
        assert [u.domain for u in urls] == ["a.com", "b.com", "c.com"]

    def test_first_error_aborts(self):
        """Test a bad URL raises for the whole batch."""
        with pytest.raises(DecodeError):
            parse_urls(["http://a.com/", "http://b.com/?a=%Z"])
