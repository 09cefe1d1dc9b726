"""
Performance benchmarks for wirerecord.

These tests measure:
- Header dump parsing throughput
- Strict and lossy decoding speed on large bodies
- Record assembly speed

Run with: python -m pytest tests/benchmarks/ -v
"""

import time

from wirerecord import build_response, lossy_decode, parse_header_block, strict_decode

REDIRECT_HOP = (
    "HTTP/1.1 302 Found\r\n"
    "Date: Mon, 29 Jan 2018 00:42:27 GMT\r\n"
    "Location: https://example.com/next\r\n"
    "Set-Cookie: session=abc; Path=/\r\n"
    "Content-Length: 0\r\n"
    "\r\n"
)
FINAL_BLOCK = (
    "HTTP/1.1 200 OK\r\n"
    "Content-Type: text/html; charset=utf-8\r\n"
    "Set-Cookie: a=1\r\n"
    "Set-Cookie: b=2\r\n"
    "\r\n"
)
LONG_CHAIN = REDIRECT_HOP * 20 + FINAL_BLOCK

# ~1MB of mixed-script UTF-8
LARGE_TEXT = "Grüße, Ππ, 世界, plain ascii text. " * 25000
LARGE_BODY = LARGE_TEXT.encode("utf-8")


class TestParsingPerformance:
    """Benchmarks for header dump parsing."""

    def test_simple_dump_parsing(self):
        """Benchmark parsing a single exchange."""
        start = time.perf_counter()
        iterations = 5000
        for _ in range(iterations):
            parse_header_block(FINAL_BLOCK)
        elapsed = time.perf_counter() - start

        ops_per_sec = iterations / elapsed
        print(f"\nSingle exchange: {ops_per_sec:.0f} parses/sec ({elapsed*1000/iterations:.3f}ms avg)")
        assert ops_per_sec > 1000, "Single exchange should parse at >1000/sec"

    def test_redirect_chain_parsing(self):
        """Benchmark parsing a 21-exchange redirect chain."""
        start = time.perf_counter()
        iterations = 500
        for _ in range(iterations):
            exchanges = parse_header_block(LONG_CHAIN.encode("ascii"))
        elapsed = time.perf_counter() - start

        assert len(exchanges) == 21
        ops_per_sec = iterations / elapsed
        print(f"\nRedirect chain: {ops_per_sec:.0f} parses/sec")
        assert ops_per_sec > 50, "Redirect chain should parse at >50/sec"


class TestDecodingPerformance:
    """Benchmarks for body decoding."""

    def test_strict_decode_large_body(self):
        """Benchmark strict decoding of ~1MB."""
        start = time.perf_counter()
        iterations = 20
        for _ in range(iterations):
            strict_decode(LARGE_BODY, "utf-8", "utf-8")
        elapsed = time.perf_counter() - start

        ops_per_sec = iterations / elapsed
        print(f"\nStrict decode (~1MB): {ops_per_sec:.1f} decodes/sec")
        assert ops_per_sec > 2, "Strict decode of 1MB should run at >2/sec"

    def test_lossy_decode_many_substitutions(self):
        """Benchmark lossy decoding where most characters need replacing."""
        start = time.perf_counter()
        iterations = 10
        for _ in range(iterations):
            text = lossy_decode(LARGE_BODY, "utf-8", "ascii")
        elapsed = time.perf_counter() - start

        assert "Gr??e" in text
        ops_per_sec = iterations / elapsed
        print(f"\nLossy decode (~1MB to ascii): {ops_per_sec:.1f} decodes/sec")
        assert ops_per_sec > 1, "Lossy decode of 1MB should run at >1/sec"


class TestRecordPerformance:
    """Benchmarks for record assembly."""

    def test_build_response_throughput(self):
        """Benchmark building records from a redirect chain."""
        start = time.perf_counter()
        iterations = 500
        for _ in range(iterations):
            build_response("https://example.com/next", 200, 20, LONG_CHAIN, b"<html></html>")
        elapsed = time.perf_counter() - start

        ops_per_sec = iterations / elapsed
        print(f"\nbuild_response: {ops_per_sec:.0f} records/sec")
        assert ops_per_sec > 50, "Record assembly should run at >50/sec"
