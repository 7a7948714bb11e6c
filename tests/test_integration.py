"""Integration tests for real HTTP behavior and CLI execution.

These tests run main() end to end against a local mock S3 server, so the
real boto3 client signs and sends every request. They check what actually
reaches the wire: path-style URLs, injected headers, listing pagination and
content-derived ETags.

These tests do NOT require real S3 credentials.
"""

import hashlib
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pytest

from r2cli.cli import main

# Objects served by the listing endpoint, split into pages of 2
LISTED_KEYS = ["a.txt", "b.txt", "c.txt", "d.txt", "e.txt"]
PAGE_SIZE = 2


class MockS3Handler(BaseHTTPRequestHandler):
    """Mock HTTP handler that simulates the S3 calls used by the CLI."""

    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        """Suppress logging."""
        pass

    def _record(self, body: bytes = b"") -> None:
        self.server.requests.append({
            "method": self.command,
            "path": self.path,
            "headers": dict(self.headers.items()),
            "body": body,
        })

    def _send(self, status: int, body: bytes = b"", headers: dict = None) -> None:
        self.send_response(status)
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_PUT(self):
        """Store nothing, answer with an MD5 ETag like S3 does."""
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length)
        self._record(body)
        etag = hashlib.md5(body).hexdigest()
        self._send(200, headers={"ETag": f'"{etag}"'})

    def do_GET(self):
        """Serve ListObjectsV2 pages of PAGE_SIZE keys."""
        self._record()
        query = parse_qs(urlparse(self.path).query)
        token = query.get("continuation-token", ["0"])[0]
        start = int(token)
        keys = LISTED_KEYS[start:start + PAGE_SIZE]
        next_start = start + PAGE_SIZE

        contents = "".join(
            f"<Contents><Key>{key}</Key><Size>1</Size></Contents>" for key in keys
        )
        truncated = next_start < len(LISTED_KEYS)
        next_token = (
            f"<NextContinuationToken>{next_start}</NextContinuationToken>"
            if truncated else ""
        )
        body = (
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<ListBucketResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
            "<Name>test6</Name>"
            f"<KeyCount>{len(keys)}</KeyCount>"
            "<MaxKeys>1000</MaxKeys>"
            f"<IsTruncated>{'true' if truncated else 'false'}</IsTruncated>"
            f"{contents}{next_token}"
            "</ListBucketResult>"
        ).encode("utf-8")
        self._send(200, body, {"Content-Type": "application/xml"})


@pytest.fixture
def mock_server():
    """Start a mock HTTP server for integration tests."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), MockS3Handler)
    server.daemon_threads = True
    server.requests = []
    port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()
    yield server, f"http://127.0.0.1:{port}"
    server.shutdown()
    server.server_close()


@pytest.fixture
def cli_env(mock_server, clean_env, tmp_path: Path):
    """Config file pointing at the mock server."""
    server, url = mock_server
    config_file = tmp_path / ".r2-cli.cfg"
    config_file.write_text(
        f"ENDPOINT_URL={url}\n"
        "AWS_ACCESS_KEY_ID=test-key\n"
        "AWS_SECRET_ACCESS_KEY=test-secret\n"
    )
    return server, str(config_file), clean_env


class TestPutObjectEndToEnd:
    """put-object against the mock server."""

    def test_etag_is_md5_of_content(self, cli_env, tmp_path: Path, capsys):
        server, config_file, _ = cli_env
        source = tmp_path / "a.txt"
        source.write_text("hello")

        result = main(["-c", config_file, "put-object", "-b", "test6", "-k", "a.txt", "-f", str(source)])

        assert result == 0
        out = capsys.readouterr().out
        assert "Object uploaded successfully" in out
        assert f'ETag: "{hashlib.md5(b"hello").hexdigest()}"' in out

        request = server.requests[-1]
        assert request["method"] == "PUT"
        assert request["path"] == "/test6/a.txt"
        assert request["body"] == b"hello"
        assert request["headers"]["Content-Length"] == "5"

    def test_injected_headers_are_sent_and_signed(self, cli_env, tmp_path: Path):
        server, config_file, env = cli_env
        env.setenv("S3_CLI_HTTP_X_Test_Header", "on")
        source = tmp_path / "a.txt"
        source.write_text("hello")

        main(["-c", config_file, "put-object", "-b", "test6", "-k", "a.txt", "-f", str(source)])

        headers = {k.lower(): v for k, v in server.requests[-1]["headers"].items()}
        assert headers["x-test-header"] == "on"
        assert "x-test-header" in headers["authorization"]

    def test_header_names_keep_underscores_when_disabled(self, cli_env, tmp_path: Path):
        server, config_file, env = cli_env
        env.setenv("S3_CLI_HTTP_X_Test_Header", "on")
        env.setenv("REPLACE_UNDERSCORES_WITH_DASHES", "false")
        source = tmp_path / "a.txt"
        source.write_text("hello")

        main(["-c", config_file, "put-object", "-b", "test6", "-k", "a.txt", "-f", str(source)])

        headers = {k.lower() for k in server.requests[-1]["headers"]}
        assert "x_test_header" in headers


class TestUploadPartEndToEnd:
    """upload-part against the mock server."""

    def test_part_query_and_etag(self, cli_env, tmp_path: Path, capsys):
        server, config_file, _ = cli_env
        part = tmp_path / "part1"
        part.write_bytes(b"part-one")

        result = main([
            "-c", config_file, "upload-part", "-b", "test6", "-k", "big.bin",
            "-n", "1", "-f", str(part), "-u", "upload-123",
        ])

        assert result == 0
        etag = hashlib.md5(b"part-one").hexdigest()
        assert capsys.readouterr().out == f'Part uploaded: "{etag}"\n'

        query = parse_qs(urlparse(server.requests[-1]["path"]).query)
        assert query["partNumber"] == ["1"]
        assert query["uploadId"] == ["upload-123"]


class TestCountObjectsEndToEnd:
    """count-objects against the paginated mock listing."""

    def test_counts_all_pages(self, cli_env, capsys):
        server, config_file, _ = cli_env

        result = main(["-c", config_file, "count-objects", "-b", "test6"])

        assert result == 0
        out = capsys.readouterr().out
        assert "Total objects in bucket: 5" in out
        assert [r["method"] for r in server.requests] == ["GET", "GET", "GET"]
        assert all(urlparse(r["path"]).path == "/test6" for r in server.requests)

    def test_list_objects_reads_one_page(self, cli_env, capsys):
        server, config_file, _ = cli_env

        result = main(["-c", config_file, "list-objects", "-b", "test6", "-f", "a"])

        assert result == 0
        out = capsys.readouterr().out
        assert "a.txt" in out
        assert "c.txt" not in out
        assert len(server.requests) == 1
        query = parse_qs(urlparse(server.requests[0]["path"]).query)
        assert query["prefix"] == ["a"]


class TestUnreachableEndpoint:
    """Transport errors are reported, not raised."""

    def test_connection_refused(self, clean_env, tmp_path: Path, capsys):
        config_file = tmp_path / ".r2-cli.cfg"
        config_file.write_text(
            "ENDPOINT_URL=http://127.0.0.1:1\n"
            "AWS_ACCESS_KEY_ID=test-key\n"
            "AWS_SECRET_ACCESS_KEY=test-secret\n"
        )
        # one attempt only, so the test does not wait on retries
        clean_env.setenv("AWS_MAX_ATTEMPTS", "1")

        result = main(["-c", str(config_file), "create-bucket", "-b", "test6"])

        assert result == 1
        assert "Error:" in capsys.readouterr().err
