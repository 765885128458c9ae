"""
Generation client: one provider round trip per call, always returning a Result.

Builds the wire payload, performs the HTTP request with ``requests``, parses
the response and converts every failure (transport, HTTP status, parse,
validation, cancellation) into ``Err``. No retries happen here.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import requests

from genbridge.core.config import Settings, get_settings
from genbridge.core.images import encode_image_file, strip_data_url
from genbridge.core.operations import (
    DEFAULT_CAPTION_PROMPT,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_STEPS,
    DEFAULT_STRENGTH,
    DEFAULT_TEMPERATURE,
    DEFAULT_VIDEO_DURATION,
    DEFAULT_WIDTH,
    ChatMessage,
    ChatRequest,
    ImageToImageRequest,
    ImageToTextRequest,
    Operation,
    OperationRequest,
    TextToImageRequest,
    VideoRequest,
)
from genbridge.core.outcomes import GenerationOutcome
from genbridge.core.parsing import extract_outcome
from genbridge.core.payloads import WirePayload, build_payload, build_status_request
from genbridge.core.providers.base import ProviderConfig
from genbridge.logging_config import get_logger, log_prompts, redact_headers
from genbridge.utils.exceptions import (
    CancellationError,
    GenbridgeError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)
from genbridge.utils.result import Err, Ok, Result, err_from

logger = get_logger(__name__)

_PROMPT_LOG_MAX = 50_000
_DEBUG_TRUNCATE_THRESHOLD = 200
_DEBUG_NEVER_TRUNCATE_KEYS = frozenset({"text", "content", "prompt", "message"})
_CANCEL_POLL_INTERVAL = 0.25

ImageInput = str | Path


def _truncate_image_data_for_log(obj: Any, parent_key: str | None = None) -> Any:
    """Recursively replace long base64/data URL strings with placeholders for safe logging."""
    if isinstance(obj, dict):
        return {k: _truncate_image_data_for_log(v, k) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_truncate_image_data_for_log(v, None) for v in obj]
    if isinstance(obj, str) and len(obj) >= _DEBUG_TRUNCATE_THRESHOLD:
        if parent_key in _DEBUG_NEVER_TRUNCATE_KEYS:
            return obj
        if obj.startswith("data:"):
            return f"<data URL, {len(obj)} chars>"
        return f"<string, {len(obj)} chars>"
    return obj


def _prompt_for_log(prompt: str) -> str:
    return prompt if len(prompt) <= _PROMPT_LOG_MAX else prompt[:_PROMPT_LOG_MAX] + "..."


def _resolve_image(image: ImageInput) -> str:
    """A Path is loaded and encoded; a string is taken as base64 (data URL prefix allowed)."""
    if isinstance(image, Path):
        try:
            return encode_image_file(image)
        except FileNotFoundError as e:
            raise ValidationError(str(e), field="image") from e
    if not image or not image.strip():
        raise ValidationError("Source image cannot be empty", field="image")
    return strip_data_url(image)


class GenerationClient:
    """Provider-agnostic client. Every public method returns Ok(outcome) or Err."""

    def __init__(
        self,
        settings: Settings | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> None:
        """
        Args:
            settings: Timeouts and debug flags; defaults to the global settings
            cancel_check: Optional callable returning True to abandon an in-flight request.
                Polled every 0.25s while the request runs on a worker thread.
        """
        self.settings = settings or get_settings()
        self.cancel_check = cancel_check

    # Operations

    def chat(
        self,
        config: ProviderConfig,
        messages: Sequence[ChatMessage],
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> Result[GenerationOutcome]:
        """Send a conversation and return ChatOutcome with the assistant reply."""
        if not messages:
            return err_from(ValidationError("Chat needs at least one message", field="messages"))
        request = ChatRequest(tuple(messages), temperature=temperature, max_tokens=max_tokens)
        return self.execute(config, request)

    def image_to_text(
        self,
        config: ProviderConfig,
        image: ImageInput,
        prompt: str = DEFAULT_CAPTION_PROMPT,
    ) -> Result[GenerationOutcome]:
        """Describe an image; returns CaptionOutcome."""
        try:
            image_b64 = _resolve_image(image)
        except GenbridgeError as e:
            return err_from(e)
        return self.execute(config, ImageToTextRequest(image_b64, prompt=prompt))

    def text_to_image(
        self,
        config: ProviderConfig,
        prompt: str,
        negative_prompt: str = "",
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        steps: int = DEFAULT_STEPS,
    ) -> Result[GenerationOutcome]:
        """Generate an image from text; returns ImageOutcome."""
        if not prompt or not prompt.strip():
            return err_from(ValidationError("Prompt cannot be empty", field="prompt"))
        request = TextToImageRequest(
            prompt, negative_prompt=negative_prompt, width=width, height=height, steps=steps
        )
        return self.execute(config, request)

    def image_to_image(
        self,
        config: ProviderConfig,
        image: ImageInput,
        prompt: str,
        strength: float = DEFAULT_STRENGTH,
        steps: int = DEFAULT_STEPS,
    ) -> Result[GenerationOutcome]:
        """Generate an image from a reference image and prompt; returns ImageOutcome."""
        try:
            image_b64 = _resolve_image(image)
        except GenbridgeError as e:
            return err_from(e)
        request = ImageToImageRequest(image_b64, prompt, strength=strength, steps=steps)
        return self.execute(config, request)

    def generate_video(
        self,
        config: ProviderConfig,
        prompt: str | None = None,
        image: ImageInput | None = None,
        duration: int = DEFAULT_VIDEO_DURATION,
    ) -> Result[GenerationOutcome]:
        """Start a video job; returns VideoOutcome (completed with URL, or pending)."""
        try:
            image_b64 = _resolve_image(image) if image is not None else None
            request = VideoRequest.create(prompt=prompt, image_b64=image_b64, duration=duration)
        except GenbridgeError as e:
            return err_from(e)
        return self.execute(config, request)

    def check_video_status(
        self, config: ProviderConfig, status_url: str
    ) -> Result[GenerationOutcome]:
        """GET a pending job's status URL; returns VideoOutcome with the provider's status."""
        if not status_url:
            return err_from(ValidationError("Status URL cannot be empty", field="status_url"))
        payload = build_status_request(config, status_url)
        return self._round_trip(config, Operation.VIDEO_STATUS, payload)

    def execute(self, config: ProviderConfig, request: OperationRequest) -> Result[GenerationOutcome]:
        """Run any typed request against a provider of the matching capability."""
        if request.capability is not config.capability:
            return err_from(
                ValidationError(
                    f"Provider {config.name!r} is configured for {config.capability.label}, "
                    f"not {request.capability.label}",
                    field="capability",
                )
            )
        prompt = getattr(request, "prompt", None)
        if prompt is None and isinstance(request, VideoRequest):
            prompt = request.source.prompt
        logger.info(
            "Calling provider=%s kind=%s operation=%s model=%s",
            config.name,
            config.provider_kind.value,
            request.operation.value,
            config.model,
        )
        if prompt and log_prompts():
            logger.info("Prompt (used): %s", _prompt_for_log(prompt))
        return self._round_trip(config, request.operation, build_payload(config, request))

    # Transport

    def _send(self, config: ProviderConfig, payload: WirePayload) -> tuple[int, bytes]:
        """Perform the HTTP request. Raises requests exceptions unchanged."""
        timeout = self.settings.timeout_for(config.timeout_seconds)
        logger.debug(
            "API request method=%s url=%s timeout=%s headers=%s",
            payload.method,
            payload.url,
            timeout,
            redact_headers(payload.headers),
        )
        if self.settings.debug_api and payload.json is not None:
            logger.info(
                "API request payload (image data truncated): %s",
                json.dumps(_truncate_image_data_for_log(payload.json), indent=2, default=str),
            )
        if payload.method == "GET":
            response = requests.get(payload.url, headers=payload.headers, timeout=timeout)
        else:
            response = requests.post(
                payload.url, headers=payload.headers, json=payload.json, timeout=timeout
            )
        if self.settings.debug_api:
            text = response.text
            if len(text) > 2000:
                text = text[:2000] + f"... <truncated, {len(response.text)} chars total>"
            logger.info("API response status=%s body: %s", response.status_code, text)
        return response.status_code, response.content

    def _send_mapped(self, config: ProviderConfig, payload: WirePayload) -> tuple[int, bytes]:
        """_send with requests exceptions mapped to TransportError / RequestTimeoutError."""
        timeout = self.settings.timeout_for(config.timeout_seconds)
        try:
            return self._send(config, payload)
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(
                f"Request to {config.name} timed out (connect {timeout[0]}s, read {timeout[1]}s)",
                original_error=e,
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(
                f"Failed to connect to {config.name} at {payload.url}. "
                "Please check the endpoint and your network connection.",
                original_error=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Network error during request to {config.name}: {str(e)}", original_error=e
            ) from e

    def _send_cancellable(self, config: ProviderConfig, payload: WirePayload) -> tuple[int, bytes]:
        """Run the request on a worker thread while polling cancel_check."""
        assert self.cancel_check is not None
        result_holder: list[tuple[int, bytes] | None] = [None]
        exc_holder: list[BaseException | None] = [None]

        def worker() -> None:
            try:
                result_holder[0] = self._send_mapped(config, payload)
            except BaseException as e:
                exc_holder[0] = e

        thread = threading.Thread(target=worker, daemon=True)
        thread.start()
        while True:
            thread.join(timeout=_CANCEL_POLL_INTERVAL)
            if not thread.is_alive():
                break
            if self.cancel_check():
                raise CancellationError(f"Request to {config.name} was cancelled.")

        if exc_holder[0] is not None:
            raise exc_holder[0]
        assert result_holder[0] is not None
        return result_holder[0]

    def _round_trip(
        self, config: ProviderConfig, operation: Operation, payload: WirePayload
    ) -> Result[GenerationOutcome]:
        start_time = time.time()
        try:
            if self.cancel_check is None:
                status, body = self._send_mapped(config, payload)
            else:
                status, body = self._send_cancellable(config, payload)
            elapsed = time.time() - start_time
            logger.debug("API response status=%s bytes=%d time=%.2fs", status, len(body), elapsed)
            outcome = extract_outcome(config, operation, status, body)
        except GenbridgeError as e:
            logger.info(
                "Call failed provider=%s operation=%s after %.1fs: %s",
                config.name,
                operation.value,
                time.time() - start_time,
                e,
            )
            return err_from(e)
        logger.info(
            "Completed in %.1fs provider=%s operation=%s",
            time.time() - start_time,
            config.name,
            operation.value,
        )
        return Ok(outcome)


__all__ = ["GenerationClient", "ImageInput", "Err", "Ok"]
