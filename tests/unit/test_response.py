"""Tests for ResponseWriter."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from expresso.config import Settings
from expresso.logger import LogLevel, RequestLogger
from expresso.payloads import HTML, JSON, YAML, File, Formatted, Text
from expresso.response import ResponseWriter


def _writer(
    settings: Settings, accept: str = ""
) -> tuple[ResponseWriter, RequestLogger]:
    logger = RequestLogger("GET", "/", colorize=False)
    writer = ResponseWriter(accept=accept, logger=lambda: logger, settings=settings)
    return writer, logger


class TestStatus:
    async def test_send_without_status_is_200(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.send(Text("ok"))
        assert writer.to_response().status_code == 200

    async def test_status_then_send(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.status(404).send(Text("missing"))
        response = writer.to_response()
        assert response.status_code == 404
        assert response.body == b"missing"

    def test_status_returns_writer(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        assert writer.status(201) is writer

    async def test_last_status_wins_before_commit(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.status(400).status(418).send(Text("teapot"))
        assert writer.to_response().status_code == 418

    def test_status_recorded_on_logger(self, settings: Settings) -> None:
        writer, logger = _writer(settings)
        writer.status(401)
        assert logger.status_code == 401

    async def test_status_after_commit_is_ignored(self, settings: Settings) -> None:
        writer, logger = _writer(settings)
        await writer.send(Text("done"))
        writer.status(500)
        assert writer.to_response().status_code == 200
        assert logger.entries[-1].level is LogLevel.ERROR


class TestSend:
    async def test_text_content_type(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.send(Text("hello"))
        response = writer.to_response()
        assert response.headers["content-type"].startswith("text/plain")
        assert writer.media_type == "text/plain"

    async def test_json_body(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.send(JSON({"name": "x"}))
        response = writer.to_response()
        assert response.headers["content-type"] == "application/json"
        assert json.loads(response.body)["name"] == "x"

    async def test_powered_by_header(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.send(HTML("<p/>"))
        assert writer.to_response().headers["x-powered-by"] == "Expresso"

    async def test_powered_by_is_configurable(self) -> None:
        custom = Settings(_env_file=None, powered_by="Ristretto")
        writer = ResponseWriter(settings=custom)
        await writer.send(Text("x"))
        assert writer.to_response().headers["x-powered-by"] == "Ristretto"

    async def test_custom_headers_are_kept(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        writer.headers["x-request-id"] = "abc"
        await writer.send(Text("x"))
        assert writer.to_response().headers["x-request-id"] == "abc"

    async def test_file_payload(self, settings: Settings, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("notes")
        writer, _ = _writer(settings)
        await writer.send(File(path))
        response = writer.to_response()
        assert response.body == b"notes"
        assert response.headers["content-type"].startswith("text/plain")

    async def test_committed_after_send(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        assert writer.committed is False
        await writer.send(Text("x"))
        assert writer.committed is True


class TestSendFailures:
    async def test_serialization_failure_becomes_500(self, settings: Settings) -> None:
        writer, logger = _writer(settings, accept="application/json")
        await writer.send(JSON({"value": object()}))
        response = writer.to_response()
        assert response.status_code == 500
        assert json.loads(response.body) == {
            "status": 500,
            "error": "Internal Server Error",
        }
        assert logger.status_code == 500
        assert logger.entries[0].level is LogLevel.ERROR

    async def test_failure_payload_follows_accept(self, settings: Settings) -> None:
        writer, _ = _writer(settings, accept="application/x-yaml")
        await writer.send(YAML({"value": object()}))
        response = writer.to_response()
        assert response.status_code == 500
        assert yaml.safe_load(response.body)["error"] == "Internal Server Error"

    async def test_missing_file_becomes_500(
        self, settings: Settings, tmp_path: Path
    ) -> None:
        writer, _ = _writer(settings)
        await writer.status(200).send(File(tmp_path / "missing.txt"))
        assert writer.to_response().status_code == 500

    async def test_unsupported_payload_forces_500(self, settings: Settings) -> None:
        writer, logger = _writer(settings, accept="text/plain")
        await writer.send({"not": "a payload"})
        response = writer.to_response()
        assert response.status_code == 500
        assert response.body == b"Error - Internal Server Error"
        assert "Unsupported response type" in logger.entries[0].message


class TestCommitGuard:
    async def test_second_send_is_ignored(self, settings: Settings) -> None:
        writer, logger = _writer(settings)
        await writer.status(404).send(Text("first"))
        await writer.send(Text("second"))
        response = writer.to_response()
        assert response.status_code == 404
        assert response.body == b"first"
        assert "already committed" in logger.entries[-1].message

    async def test_send_status_after_send_is_ignored(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.send(Text("first"))
        writer.send_status(500)
        assert writer.to_response().status_code == 200

    async def test_redirect_after_send_is_ignored(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        await writer.send(Text("first"))
        writer.redirect("/elsewhere")
        assert "location" not in writer.to_response().headers


class TestSendStatusAndRedirect:
    def test_send_status_has_empty_body(self, settings: Settings) -> None:
        writer, logger = _writer(settings)
        writer.send_status(204)
        response = writer.to_response()
        assert response.status_code == 204
        assert response.body == b""
        assert writer.committed
        assert logger.status_code == 204

    def test_send_status_has_no_powered_by(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        writer.send_status(400)
        assert "x-powered-by" not in writer.to_response().headers

    def test_redirect(self, settings: Settings) -> None:
        writer, logger = _writer(settings)
        writer.redirect("https://example.com/next", 301)
        response = writer.to_response()
        assert response.status_code == 301
        assert response.headers["location"] == "https://example.com/next"
        assert response.body == b""
        assert logger.status_code == 301

    def test_redirect_default_status(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        writer.redirect("/login")
        assert writer.to_response().status_code == 302


class TestFormatted:
    async def test_sends_negotiated_variant(self, settings: Settings) -> None:
        writer, _ = _writer(settings, accept="text/plain")
        await writer.formatted(Formatted(default=JSON({"a": 1}), text=Text("a=1")))
        assert writer.to_response().body == b"a=1"

    async def test_sends_default_variant(self, settings: Settings) -> None:
        writer, _ = _writer(settings, accept="application/foo")
        await writer.formatted(Formatted(default=JSON({"a": 1}), text=Text("a=1")))
        assert json.loads(writer.to_response().body) == {"a": 1}


class TestToResponse:
    def test_uncommitted_is_empty_200(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        response = writer.to_response()
        assert response.status_code == 200
        assert response.body == b""

    def test_uncommitted_keeps_pending_status(self, settings: Settings) -> None:
        writer, _ = _writer(settings)
        writer.status(202)
        assert writer.to_response().status_code == 202

    def test_writer_without_logger(self, settings: Settings) -> None:
        writer = ResponseWriter(settings=settings)
        writer.status(500)
        writer.send_status(500)
        writer.send_status(501)
        assert writer.to_response().status_code == 500
