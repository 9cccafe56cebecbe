"""Tests for HTTP traffic logging."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from restclient import FileHTTPLogger
from restclient import PayloadEncodingError
from restclient import Raw
from restclient import Value


class TestFileHTTPLogger:
    """Test FileHTTPLogger output."""

    def test_file_logger_creates_dirs(self) -> None:
        """Test that FileHTTPLogger creates parent directories."""
        with TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "nested" / "dirs" / "http.log"
            FileHTTPLogger(log_path)
            assert log_path.exists()
            assert log_path.parent.exists()

    def test_file_logger_logs_request(self) -> None:
        """Test logging an HTTP request."""
        with TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "http.log"
            logger = FileHTTPLogger(log_path)

            logger.log_request("POST", "https://api.example.com/v1/items", {"name": "widget"})

            content = log_path.read_text()
            assert ">>> REQUEST" in content
            payload = json.loads(content.split(">>> REQUEST ", 1)[1])
            assert payload == {
                "method": "POST",
                "url": "https://api.example.com/v1/items",
                "body": {"name": "widget"},
            }

    def test_file_logger_logs_response(self) -> None:
        """Test logging an HTTP response."""
        with TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "http.log"
            logger = FileHTTPLogger(log_path)

            logger.log_response("https://api.example.com/v1/items", 201)

            content = log_path.read_text()
            assert "<<< RESPONSE" in content
            assert '"status": 201' in content

    def test_file_logger_appends(self) -> None:
        """Test that entries are appended one per line."""
        with TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "http.log"
            logger = FileHTTPLogger(log_path)

            logger.log_request("GET", "http://h/a", None)
            logger.log_response("http://h/a", 200)
            FileHTTPLogger(log_path).log_request("GET", "http://h/b", None)

            lines = log_path.read_text().splitlines()
            assert len(lines) == 3
            assert all(line.startswith("[") for line in lines)


class TestClientTrafficLogging:
    """Test that RestClient reports traffic to its HTTP logger."""

    @pytest.mark.asyncio
    async def test_json_and_raw_payloads(self, server, client) -> None:
        """Test request and response entries for both payload kinds."""
        server.respond("/items", 201, {"response": "created"})
        with TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "http.log"
            client.set_http_logger(FileHTTPLogger(log_path))

            await client.do("POST", "/items", Value({"name": "widget"}))
            await client.do("PUT", "/items", Raw(b"secret bytes"))

            content = log_path.read_text()

        url = client.full_path("/items")
        assert content.count(">>> REQUEST") == 2
        assert content.count("<<< RESPONSE") == 2
        assert url in content
        assert '"name": "widget"' in content
        assert "<raw stream>" in content
        assert "secret bytes" not in content

    @pytest.mark.asyncio
    async def test_nothing_logged_for_unencodable_payload(self, server, client) -> None:
        """Test that a payload failing to encode is not logged as sent."""
        with TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "http.log"
            client.set_http_logger(FileHTTPLogger(log_path))

            with pytest.raises(PayloadEncodingError):
                await client.do("POST", "/items", Value(float("inf")))

            assert log_path.read_text() == ""
