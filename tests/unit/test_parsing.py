"""Unit tests for response parsing."""

import json
import logging

import pytest

from genbridge.core.operations import Operation
from genbridge.core.outcomes import (
    CaptionOutcome,
    ChatOutcome,
    ImageKind,
    ImageOutcome,
    VideoOutcome,
)
from genbridge.core.parsing import parse_response
from genbridge.core.providers.base import Capability, ProviderConfig
from genbridge.utils.result import Err, Ok

OPENAI_CHAT = ProviderConfig("gpt", Capability.CHAT, "https://api.openai.com/v1/chat/completions")
ANTHROPIC = ProviderConfig("claude", Capability.CHAT, "https://api.anthropic.com/v1/messages")
CAPTION = ProviderConfig("blip", Capability.IMAGE_TO_TEXT, "https://api.replicate.com/v1/predictions")
IMAGE = ProviderConfig("img", Capability.TEXT_TO_IMAGE, "https://example.com/generate")
VIDEO = ProviderConfig("vid", Capability.VIDEO, "https://api.replicate.com/v1/predictions")


def _body(data) -> bytes:
    return json.dumps(data).encode("utf-8")


@pytest.mark.unit
class TestStatusAndJson:
    def test_non_2xx_is_http_status_error(self):
        result = parse_response(OPENAI_CHAT, Operation.CHAT, 401, b'{"error": "bad key"}')
        assert isinstance(result, Err)
        assert result.kind == "http_status"
        assert result.error.status_code == 401
        assert "401" in result.message
        assert "bad key" in result.message

    def test_long_body_is_truncated_in_error(self):
        result = parse_response(OPENAI_CHAT, Operation.CHAT, 500, b"x" * 5000)
        assert isinstance(result, Err)
        assert len(result.error.response) < 1000

    def test_invalid_json_is_parse_error(self):
        result = parse_response(OPENAI_CHAT, Operation.CHAT, 200, b"<html>oops</html>")
        assert isinstance(result, Err)
        assert result.kind == "parse"


@pytest.mark.unit
class TestChat:
    def test_openai_choices(self):
        body = _body({"choices": [{"message": {"role": "assistant", "content": "Hi!"}}]})
        assert parse_response(OPENAI_CHAT, Operation.CHAT, 200, body) == Ok(ChatOutcome("Hi!"))

    def test_anthropic_content(self):
        body = _body({"content": [{"type": "text", "text": "Hello"}]})
        assert parse_response(ANTHROPIC, Operation.CHAT, 200, body) == Ok(ChatOutcome("Hello"))

    def test_kind_decides_path_even_if_other_field_present(self):
        body = _body({"choices": [{"message": {"content": "from choices"}}]})
        result = parse_response(ANTHROPIC, Operation.CHAT, 200, body)
        assert isinstance(result, Err)
        assert result.kind == "parse"
        assert "content" in result.message

    def test_empty_choices_is_parse_error(self):
        result = parse_response(OPENAI_CHAT, Operation.CHAT, 200, _body({"choices": []}))
        assert isinstance(result, Err)
        assert "choices[0]" in result.message

    def test_non_text_content_is_parse_error(self):
        body = _body({"choices": [{"message": {"content": None}}]})
        result = parse_response(OPENAI_CHAT, Operation.CHAT, 200, body)
        assert isinstance(result, Err)
        assert result.kind == "parse"


@pytest.mark.unit
class TestCaption:
    def test_choices_first(self):
        body = _body({"choices": [{"message": {"content": "a cat"}}], "output": "ignored"})
        assert parse_response(CAPTION, Operation.IMAGE_TO_TEXT, 200, body) == Ok(
            CaptionOutcome("a cat")
        )

    def test_output_string(self):
        body = _body({"output": "Caption: a dog"})
        assert parse_response(CAPTION, Operation.IMAGE_TO_TEXT, 200, body) == Ok(
            CaptionOutcome("Caption: a dog")
        )

    def test_output_list_joined(self):
        body = _body({"output": ["a ", "red ", "car"]})
        assert parse_response(CAPTION, Operation.IMAGE_TO_TEXT, 200, body) == Ok(
            CaptionOutcome("a red car")
        )

    def test_unrecognized_body_returned_as_text(self):
        raw = b'{"caption": "plain"}'
        assert parse_response(CAPTION, Operation.IMAGE_TO_TEXT, 200, raw) == Ok(
            CaptionOutcome('{"caption": "plain"}')
        )

    def test_empty_output_is_parse_error(self):
        result = parse_response(CAPTION, Operation.IMAGE_TO_TEXT, 200, _body({"output": []}))
        assert isinstance(result, Err)
        assert result.kind == "parse"


@pytest.mark.unit
class TestImage:
    def test_data_url(self):
        body = _body({"data": [{"url": "https://cdn.example.com/a.png"}]})
        result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, body)
        assert result == Ok(ImageOutcome.from_url("https://cdn.example.com/a.png"))
        assert result.value.url == "https://cdn.example.com/a.png"
        assert result.value.base64 is None

    def test_data_b64_json(self):
        body = _body({"data": [{"b64_json": "QUJD"}]})
        result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, body)
        assert result.value.kind is ImageKind.BASE64
        assert result.value.base64 == "QUJD"
        assert result.value.url is None

    def test_artifacts_base64(self):
        body = _body({"artifacts": [{"base64": "QUJD", "seed": 1}]})
        result = parse_response(IMAGE, Operation.IMAGE_TO_IMAGE, 200, body)
        assert result == Ok(ImageOutcome.from_base64("QUJD"))

    def test_urls_list(self):
        body = _body({"urls": ["https://cdn.example.com/b.png"]})
        result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, body)
        assert result == Ok(ImageOutcome.from_url("https://cdn.example.com/b.png"))

    def test_output_string_and_list(self):
        for output in ("https://cdn.example.com/c.png", ["https://cdn.example.com/c.png", "x"]):
            result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, _body({"output": output}))
            assert result == Ok(ImageOutcome.from_url("https://cdn.example.com/c.png"))

    def test_priority_data_over_output(self):
        body = _body({"output": "https://o.example.com", "data": [{"url": "https://d.example.com"}]})
        result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, body)
        assert result.value.url == "https://d.example.com"

    def test_data_without_url_or_b64_is_parse_error(self):
        result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, _body({"data": [{"x": 1}]}))
        assert isinstance(result, Err)
        assert result.kind == "parse"

    def test_empty_artifacts_is_parse_error(self):
        result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, _body({"artifacts": []}))
        assert isinstance(result, Err)
        assert "artifacts[0]" in result.message

    def test_unrecognized_body_is_flagged_fallback(self, caplog):
        raw = b'{"result": "something"}'
        with caplog.at_level(logging.WARNING, logger="genbridge.core.parsing"):
            result = parse_response(IMAGE, Operation.TEXT_TO_IMAGE, 200, raw)
        assert isinstance(result, Ok)
        assert result.value.kind is ImageKind.RAW_BODY
        assert result.value.is_fallback is True
        assert result.value.raw_body == '{"result": "something"}'
        assert result.value.url is None
        assert any("Unrecognized image response" in r.message for r in caplog.records)


@pytest.mark.unit
class TestVideo:
    def test_id_is_pending_with_status_url(self):
        body = _body({"id": "abc", "urls": {"get": "https://api.replicate.com/v1/predictions/abc"}})
        result = parse_response(VIDEO, Operation.VIDEO, 200, body)
        assert result == Ok(
            VideoOutcome("pending", "https://api.replicate.com/v1/predictions/abc")
        )
        assert result.value.is_pending

    def test_id_without_urls_is_pending_without_url(self):
        result = parse_response(VIDEO, Operation.VIDEO, 200, _body({"id": "abc"}))
        assert result == Ok(VideoOutcome("pending", None))

    def test_output_string_is_completed(self):
        result = parse_response(VIDEO, Operation.VIDEO, 200, _body({"output": "https://v.example.com/v.mp4"}))
        assert result == Ok(VideoOutcome("completed", "https://v.example.com/v.mp4"))
        assert result.value.is_succeeded

    def test_output_list_is_completed(self):
        body = _body({"output": ["https://v.example.com/1.mp4", "https://v.example.com/2.mp4"]})
        result = parse_response(VIDEO, Operation.VIDEO, 200, body)
        assert result.value.video_url == "https://v.example.com/1.mp4"

    def test_nothing_recognized_is_pending(self):
        result = parse_response(VIDEO, Operation.VIDEO, 200, _body({"queued": True}))
        assert result == Ok(VideoOutcome("pending", None))


@pytest.mark.unit
class TestVideoStatus:
    def test_status_copied_verbatim(self):
        body = _body({"status": "processing", "output": None})
        result = parse_response(VIDEO, Operation.VIDEO_STATUS, 200, body)
        assert result == Ok(VideoOutcome("processing", None))
        assert not result.value.is_succeeded

    def test_succeeded_with_output(self):
        body = _body({"status": "succeeded", "output": ["https://v.example.com/v.mp4"]})
        result = parse_response(VIDEO, Operation.VIDEO_STATUS, 200, body)
        assert result.value.is_succeeded
        assert result.value.video_url == "https://v.example.com/v.mp4"

    def test_succeeded_without_url_is_not_success(self):
        result = parse_response(VIDEO, Operation.VIDEO_STATUS, 200, _body({"status": "succeeded"}))
        assert result.value.is_succeeded is False

    def test_missing_status_is_unknown(self):
        result = parse_response(VIDEO, Operation.VIDEO_STATUS, 200, _body({}))
        assert result.value.status == "unknown"

    def test_failed(self):
        result = parse_response(VIDEO, Operation.VIDEO_STATUS, 200, _body({"status": "failed"}))
        assert result.value.is_failed

    def test_non_object_is_parse_error(self):
        result = parse_response(VIDEO, Operation.VIDEO_STATUS, 200, b"[1, 2]")
        assert isinstance(result, Err)
        assert result.kind == "parse"
