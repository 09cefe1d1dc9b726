"""Tests for building records from requests responses."""

from wirerecord.adapters import raw_headers_from_requests, record_from_requests


class TestRawHeadersFromRequests:
    """Tests for raw_headers_from_requests()."""

    def test_single_response(self, make_response):
        response = make_response(200, "OK", "https://example.com/", [("Server", "x")])

        assert raw_headers_from_requests(response) == "HTTP/1.1 200 OK\r\nServer: x\r\n\r\n"

    def test_history_comes_first(self, make_response):
        """Test that redirect hops precede the final response."""
        hop = make_response(301, "Moved Permanently", "http://example.com/", [("Location", "https://example.com/")])
        final = make_response(200, "OK", "https://example.com/", [("Server", "x")], history=[hop])

        raw = raw_headers_from_requests(final)
        assert raw.startswith("HTTP/1.1 301 Moved Permanently\r\nLocation: https://example.com/\r\n\r\n")
        assert raw.endswith("HTTP/1.1 200 OK\r\nServer: x\r\n\r\n")

    def test_http2_version(self, make_response):
        response = make_response(200, None, "https://example.com/", [], version=20)
        assert raw_headers_from_requests(response) == "HTTP/2 200\r\n\r\n"


class TestRecordFromRequests:
    """Tests for record_from_requests()."""

    def test_builds_record(self, make_response):
        """Test that duplicates, redirects and body carry over."""
        hop = make_response(302, "Found", "http://example.com/", [("Location", "/next")])
        final = make_response(
            200,
            "OK",
            "https://example.com/next",
            [
                ("Content-Type", "text/plain; charset=iso-8859-1"),
                ("Set-Cookie", "a=1"),
                ("Set-Cookie", "b=2"),
            ],
            content="café".encode("iso-8859-1"),
            history=[hop],
        )

        record = record_from_requests(final)

        assert record.url == "https://example.com/next"
        assert record.status == 200
        assert record.redirect_count == 1
        assert record.headers["Set-Cookie"] == ("a=1", "b=2")
        assert record.charset == "iso-8859-1"
        assert record.decoded_body("utf-8") == "café"
        assert [ex.status for ex in record.exchanges] == [302, 200]

    def test_streamed_body(self, make_response):
        response = make_response(200, "OK", "https://example.com/", [], content=b"data")

        record = record_from_requests(response, streamed=True)
        assert record.body is None

    def test_default_charset(self, make_response):
        response = make_response(200, "OK", "https://example.com/", [], content=b"abc")

        record = record_from_requests(response, default_charset="utf-8")
        assert record.charset == "utf-8"
        assert record.decoded_body() == "abc"
