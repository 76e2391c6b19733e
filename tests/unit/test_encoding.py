"""Tests for parameter and URL encoding helpers."""

import pytest

from disqus_client.encoding import (
    api_url,
    append_query,
    encode_params,
    extract_code,
    percent_encode_alphanumeric,
)


class TestEncodeParams:
    """Test the verbatim key=value serializer."""

    def test_joins_every_pair_without_trailing_separator(self):
        params = {"forum": "news", "limit": 25, "order": "desc"}

        encoded = encode_params(params)

        assert not encoded.endswith("&")
        assert sorted(encoded.split("&")) == ["forum=news", "limit=25", "order=desc"]

    def test_single_pair(self):
        assert encode_params({"api_key": "X"}) == "api_key=X"

    def test_empty_params(self):
        assert encode_params({}) == ""

    def test_values_are_not_escaped(self):
        encoded = encode_params({"message": "hello world/ünï"})

        assert encoded == "message=hello world/ünï"

    def test_reserved_characters_corrupt_the_payload(self):
        """Values containing & or = are inserted verbatim and split the pair."""
        encoded = encode_params({"message": "a&b=c"})

        assert encoded == "message=a&b=c"
        assert encoded.split("&") == ["message=a", "b=c"]


class TestAppendQuery:
    """Test query string construction for non-POST requests."""

    def test_appends_params(self):
        url = append_query("https://disqus.com/api/3.0/threads/list.json", {"forum": "news"})

        assert url == "https://disqus.com/api/3.0/threads/list.json?forum=news"

    def test_no_question_mark_without_params(self):
        url = append_query("https://disqus.com/api/3.0/threads/list.json", {})

        assert url == "https://disqus.com/api/3.0/threads/list.json"


class TestPercentEncodeAlphanumeric:
    """Test redirect URI escaping."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("app://cb", "app%3A%2F%2Fcb"),
            ("http://localhost:8765/callback", "http%3A%2F%2Flocalhost%3A8765%2Fcallback"),
            ("a-b_c.d~e", "a%2Db%5Fc%2Ed%7Ee"),
            ("abcXYZ019", "abcXYZ019"),
        ],
    )
    def test_only_ascii_alphanumerics_survive(self, value, expected):
        assert percent_encode_alphanumeric(value) == expected

    def test_non_ascii_is_utf8_escaped(self):
        assert percent_encode_alphanumeric("é") == "%C3%A9"


class TestUrls:
    """Test URL helpers."""

    def test_api_url_appends_json_suffix(self):
        assert (
            api_url("https://disqus.com/api/3.0/", "threads/list")
            == "https://disqus.com/api/3.0/threads/list.json"
        )

    def test_extract_code(self):
        assert extract_code("app://cb?code=abc123") == "abc123"

    def test_extract_code_among_other_params(self):
        assert extract_code("http://localhost:8765/callback?state=s&code=xyz") == "xyz"

    def test_extract_code_missing(self):
        assert extract_code("app://cb?error=access_denied") is None
        assert extract_code("app://cb") is None

    def test_extract_code_keeps_percent_escapes(self):
        assert extract_code("app://cb?code=ab%26x%3D1&state=s") == "ab%26x%3D1"

    def test_extract_code_empty_value(self):
        assert extract_code("app://cb?code=&state=s") is None
