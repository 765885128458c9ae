"""
Request building: provider config + typed operation request -> wire payload.

Pure functions, no I/O. The payload shape is chosen from the config's
ProviderKind; kinds without a dedicated shape for an operation use the
generic shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from genbridge.core.images import create_image_data_url
from genbridge.core.operations import (
    ChatRequest,
    ImageToImageRequest,
    ImageToTextRequest,
    OperationRequest,
    TextToImageRequest,
    VideoRequest,
)
from genbridge.core.providers.base import ProviderConfig, ProviderKind

VIDEO_FPS = 24
CFG_SCALE = 7
CAPTION_MAX_TOKENS = 1000


@dataclass(frozen=True)
class WirePayload:
    """Everything the transport needs for one HTTP request."""

    method: str
    url: str
    headers: dict[str, str]
    json: dict[str, Any] | None = None


def build_headers(config: ProviderConfig) -> dict[str, str]:
    """Bearer auth and JSON content type, then extra headers in mapping order (they may override)."""
    headers = {
        "Authorization": f"Bearer {config.credential}",
        "Content-Type": "application/json",
    }
    for key, value in config.extra_headers.items():
        headers[key] = value
    return headers


def _chat_payload(config: ProviderConfig, request: ChatRequest) -> dict[str, Any]:
    messages = [{"role": m.role, "content": m.content} for m in request.messages]
    if config.provider_kind is ProviderKind.ANTHROPIC:
        return {"model": config.model, "max_tokens": request.max_tokens, "messages": messages}
    return {
        "model": config.model,
        "temperature": request.temperature,
        "max_tokens": request.max_tokens,
        "messages": messages,
    }


def _caption_payload(config: ProviderConfig, request: ImageToTextRequest) -> dict[str, Any]:
    image_url = create_image_data_url(request.image_b64)
    if config.provider_kind is ProviderKind.OPENAI_VISION:
        return {
            "model": config.model,
            "max_tokens": CAPTION_MAX_TOKENS,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": request.prompt},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                }
            ],
        }
    return {"version": config.model, "input": {"image": image_url}}


def _text_to_image_payload(config: ProviderConfig, request: TextToImageRequest) -> dict[str, Any]:
    kind = config.provider_kind
    if kind is ProviderKind.DALLE:
        return {
            "model": config.model,
            "prompt": request.prompt,
            "n": 1,
            "size": f"{request.width}x{request.height}",
            "response_format": "url",
        }
    if kind is ProviderKind.STABILITY:
        text_prompts: list[dict[str, Any]] = [{"text": request.prompt, "weight": 1.0}]
        if request.negative_prompt:
            text_prompts.append({"text": request.negative_prompt, "weight": -1.0})
        return {
            "text_prompts": text_prompts,
            "cfg_scale": CFG_SCALE,
            "steps": request.steps,
            "width": request.width,
            "height": request.height,
        }
    if kind is ProviderKind.REPLICATE:
        return {
            "version": config.model,
            "input": {
                "prompt": request.prompt,
                "negative_prompt": request.negative_prompt,
                "width": request.width,
                "height": request.height,
                "num_inference_steps": request.steps,
            },
        }
    return {
        "prompt": request.prompt,
        "negative_prompt": request.negative_prompt,
        "width": request.width,
        "height": request.height,
        "steps": request.steps,
    }


def _image_to_image_payload(
    config: ProviderConfig, request: ImageToImageRequest
) -> dict[str, Any]:
    kind = config.provider_kind
    if kind is ProviderKind.STABILITY:
        return {
            "text_prompts": [{"text": request.prompt, "weight": 1.0}],
            "init_image": request.image_b64,
            "image_strength": request.strength,
            "cfg_scale": CFG_SCALE,
            "steps": request.steps,
        }
    if kind is ProviderKind.REPLICATE:
        return {
            "version": config.model,
            "input": {
                "image": create_image_data_url(request.image_b64),
                "prompt": request.prompt,
                "strength": request.strength,
                "num_inference_steps": request.steps,
            },
        }
    return {
        "prompt": request.prompt,
        "init_image": request.image_b64,
        "strength": request.strength,
        "steps": request.steps,
    }


def _video_payload(config: ProviderConfig, request: VideoRequest) -> dict[str, Any]:
    prompt = request.source.prompt
    image_b64 = request.source.image_b64
    kind = config.provider_kind
    if kind is ProviderKind.REPLICATE:
        replicate_input: dict[str, Any] = {}
        if image_b64 is not None:
            replicate_input["image"] = image_b64
        if prompt is not None:
            replicate_input["prompt"] = prompt
        replicate_input["fps"] = VIDEO_FPS
        replicate_input["num_frames"] = request.duration * VIDEO_FPS
        return {"version": config.model, "input": replicate_input}

    payload: dict[str, Any] = {"prompt": prompt or ""}
    if image_b64 is not None:
        payload["image_prompt" if kind is ProviderKind.RUNWAY else "image"] = image_b64
    payload["duration"] = request.duration
    return payload


def build_payload(config: ProviderConfig, request: OperationRequest) -> WirePayload:
    """Build the POST request for a generation call."""
    body: dict[str, Any]
    if isinstance(request, ChatRequest):
        body = _chat_payload(config, request)
    elif isinstance(request, ImageToTextRequest):
        body = _caption_payload(config, request)
    elif isinstance(request, TextToImageRequest):
        body = _text_to_image_payload(config, request)
    elif isinstance(request, ImageToImageRequest):
        body = _image_to_image_payload(config, request)
    else:
        body = _video_payload(config, request)
    return WirePayload(method="POST", url=config.endpoint, headers=build_headers(config), json=body)


def build_status_request(config: ProviderConfig, status_url: str) -> WirePayload:
    """Build the GET request that checks a pending video job."""
    return WirePayload(method="GET", url=status_url, headers=build_headers(config))
