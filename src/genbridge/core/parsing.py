"""
Response parsing: HTTP status + raw body -> normalized outcome.

Extraction follows a fixed priority per operation (first matching field
wins). Extractors raise HttpStatusError / ParseError; ``parse_response``
turns them into ``Err`` results.
"""

from __future__ import annotations

import json
from typing import Any

from genbridge.core.operations import Operation
from genbridge.core.outcomes import (
    STATUS_COMPLETED,
    STATUS_PENDING,
    STATUS_UNKNOWN,
    CaptionOutcome,
    ChatOutcome,
    GenerationOutcome,
    ImageOutcome,
    VideoOutcome,
)
from genbridge.core.providers.base import ProviderConfig, ProviderKind
from genbridge.logging_config import get_logger
from genbridge.utils.exceptions import GenbridgeError, HttpStatusError, ParseError
from genbridge.utils.result import Ok, Result, err_from

logger = get_logger(__name__)

_BODY_SNIPPET_MAX = 500


def _snippet(text: str) -> str:
    if len(text) <= _BODY_SNIPPET_MAX:
        return text
    return text[:_BODY_SNIPPET_MAX] + f"... <truncated, {len(text)} chars total>"


def check_status(http_status: int, body_text: str) -> None:
    """Raise HttpStatusError for any status outside [200, 300)."""
    if 200 <= http_status < 300:
        return
    snippet = _snippet(body_text.strip())
    message = f"API error: {http_status}"
    if snippet:
        message = f"{message} - {snippet}"
    raise HttpStatusError(message, status_code=http_status, response=snippet)


def _decode_json(body_text: str) -> Any:
    try:
        return json.loads(body_text)
    except ValueError as e:
        raise ParseError(
            f"Failed to parse API response as JSON: {str(e)}", response=_snippet(body_text)
        ) from e


def _dig(data: Any, *path: str | int) -> Any:
    """Follow keys/indexes through nested JSON; raise ParseError naming the missing step."""
    current = data
    walked = ""
    for step in path:
        walked = f"{walked}[{step}]" if isinstance(step, int) else f"{walked}.{step}".lstrip(".")
        try:
            if isinstance(step, int):
                if not isinstance(current, list):
                    raise TypeError
                current = current[step]
            else:
                if not isinstance(current, dict):
                    raise TypeError
                current = current[step]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError(
                f"Missing '{walked}' in API response", response=_snippet(json.dumps(data))
            ) from e
    return current


def _dig_str(data: Any, *path: str | int) -> str:
    value = _dig(data, *path)
    if not isinstance(value, str):
        raise ParseError(
            f"Expected text at '{'.'.join(str(p) for p in path)}', got {type(value).__name__}",
            response=_snippet(json.dumps(data)),
        )
    return value


def _output_url(output: Any) -> str | None:
    """A string output is the URL; a non-empty list's first element is; anything else is None."""
    if isinstance(output, str):
        return output
    if isinstance(output, list) and output and isinstance(output[0], str):
        return output[0]
    return None


def _extract_chat(config: ProviderConfig, data: Any) -> ChatOutcome:
    if config.provider_kind is ProviderKind.ANTHROPIC:
        return ChatOutcome(_dig_str(data, "content", 0, "text"))
    return ChatOutcome(_dig_str(data, "choices", 0, "message", "content"))


def _extract_caption(data: Any, body_text: str) -> CaptionOutcome:
    if isinstance(data, dict) and "choices" in data:
        return CaptionOutcome(_dig_str(data, "choices", 0, "message", "content"))
    if isinstance(data, dict) and "output" in data:
        output = data["output"]
        if isinstance(output, str):
            return CaptionOutcome(output)
        if isinstance(output, list) and output and all(isinstance(p, str) for p in output):
            return CaptionOutcome("".join(output))
        raise ParseError("Caption output is empty or not text", response=_snippet(body_text))
    return CaptionOutcome(body_text)


def _extract_image(data: Any, body_text: str) -> ImageOutcome:
    if isinstance(data, dict):
        if isinstance(data.get("data"), list) and data["data"]:
            first = _dig(data, "data", 0)
            if isinstance(first, dict) and "url" in first:
                return ImageOutcome.from_url(_dig_str(data, "data", 0, "url"))
            return ImageOutcome.from_base64(_dig_str(data, "data", 0, "b64_json"))
        if "artifacts" in data:
            return ImageOutcome.from_base64(_dig_str(data, "artifacts", 0, "base64"))
        if "urls" in data and isinstance(data["urls"], list):
            return ImageOutcome.from_url(_dig_str(data, "urls", 0))
        if "output" in data:
            url = _output_url(data["output"])
            if url is None:
                raise ParseError("Image output is empty or not a URL", response=_snippet(body_text))
            return ImageOutcome.from_url(url)
    logger.warning(
        "Unrecognized image response shape; keeping raw body (%d chars) as a fallback",
        len(body_text),
    )
    return ImageOutcome.from_raw_body(body_text)


def _extract_video(data: Any) -> VideoOutcome:
    if not isinstance(data, dict):
        return VideoOutcome(status=STATUS_PENDING)
    if "id" in data:
        urls = data.get("urls")
        status_url = urls.get("get") if isinstance(urls, dict) else None
        return VideoOutcome(
            status=STATUS_PENDING,
            video_url=status_url if isinstance(status_url, str) and status_url else None,
        )
    url = _output_url(data.get("output"))
    if url is not None:
        return VideoOutcome(status=STATUS_COMPLETED, video_url=url)
    return VideoOutcome(status=STATUS_PENDING)


def _extract_video_status(data: Any) -> VideoOutcome:
    if not isinstance(data, dict):
        raise ParseError("Video status response is not a JSON object", response=_snippet(str(data)))
    status = data.get("status")
    return VideoOutcome(
        status=str(status) if status is not None else STATUS_UNKNOWN,
        video_url=_output_url(data.get("output")),
    )


def extract_outcome(
    config: ProviderConfig, operation: Operation, http_status: int, raw_body: bytes
) -> GenerationOutcome:
    """Parse one response. Raises HttpStatusError or ParseError."""
    body_text = raw_body.decode("utf-8", errors="replace")
    check_status(http_status, body_text)
    data = _decode_json(body_text)
    if operation is Operation.CHAT:
        return _extract_chat(config, data)
    if operation is Operation.IMAGE_TO_TEXT:
        return _extract_caption(data, body_text)
    if operation in (Operation.TEXT_TO_IMAGE, Operation.IMAGE_TO_IMAGE):
        return _extract_image(data, body_text)
    if operation is Operation.VIDEO:
        return _extract_video(data)
    return _extract_video_status(data)


def parse_response(
    config: ProviderConfig, operation: Operation, http_status: int, raw_body: bytes
) -> Result[GenerationOutcome]:
    """Parse one response into Ok(outcome) or Err."""
    try:
        return Ok(extract_outcome(config, operation, http_status, raw_body))
    except GenbridgeError as e:
        return err_from(e)
