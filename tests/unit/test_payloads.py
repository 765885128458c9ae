"""Unit tests for wire payload building."""

import pytest

from genbridge.core.operations import (
    ChatMessage,
    ChatRequest,
    ImageToImageRequest,
    ImageToTextRequest,
    TextToImageRequest,
    VideoRequest,
)
from genbridge.core.payloads import build_headers, build_payload, build_status_request
from genbridge.core.providers.base import Capability, ProviderConfig


def _config(capability, endpoint, model="m", **kw):
    return ProviderConfig(
        name="test", capability=capability, endpoint=endpoint, credential="sk-test", model=model, **kw
    )


CHAT_REQUEST = ChatRequest((ChatMessage("user", "hello"),), temperature=0.5, max_tokens=100)


@pytest.mark.unit
class TestHeaders:
    def test_bearer_and_json(self):
        headers = build_headers(_config(Capability.CHAT, "https://api.openai.com/v1/chat/completions"))
        assert headers == {"Authorization": "Bearer sk-test", "Content-Type": "application/json"}

    def test_extra_headers_applied_in_order_and_override(self):
        config = _config(
            Capability.CHAT,
            "https://api.anthropic.com/v1/messages",
            extra_headers={"anthropic-version": "2023-06-01", "Authorization": "Token abc"},
        )
        headers = build_headers(config)
        assert headers["Authorization"] == "Token abc"
        assert headers["anthropic-version"] == "2023-06-01"
        assert list(headers) == ["Authorization", "Content-Type", "anthropic-version"]

    def test_status_request_is_get_with_same_headers(self):
        config = _config(Capability.VIDEO, "https://api.replicate.com/v1/predictions")
        payload = build_status_request(config, "https://api.replicate.com/v1/predictions/abc")
        assert payload.method == "GET"
        assert payload.url == "https://api.replicate.com/v1/predictions/abc"
        assert payload.headers["Authorization"] == "Bearer sk-test"
        assert payload.json is None


@pytest.mark.unit
class TestChatPayload:
    def test_openai_shape(self):
        config = _config(Capability.CHAT, "https://api.openai.com/v1/chat/completions", model="gpt-4")
        payload = build_payload(config, CHAT_REQUEST)
        assert payload.method == "POST"
        assert payload.url == config.endpoint
        assert payload.json == {
            "model": "gpt-4",
            "temperature": 0.5,
            "max_tokens": 100,
            "messages": [{"role": "user", "content": "hello"}],
        }

    def test_anthropic_shape_has_no_temperature(self):
        config = _config(Capability.CHAT, "https://api.anthropic.com/v1/messages", model="claude")
        payload = build_payload(config, CHAT_REQUEST)
        assert payload.json == {
            "model": "claude",
            "max_tokens": 100,
            "messages": [{"role": "user", "content": "hello"}],
        }


@pytest.mark.unit
class TestCaptionPayload:
    def test_openai_vision_shape(self):
        config = _config(
            Capability.IMAGE_TO_TEXT,
            "https://api.openai.com/v1/chat/completions",
            model="gpt-4-vision-preview",
        )
        payload = build_payload(config, ImageToTextRequest("QUJD", prompt="describe"))
        assert payload.json["max_tokens"] == 1000
        content = payload.json["messages"][0]["content"]
        assert payload.json["messages"][0]["role"] == "user"
        assert content[0] == {"type": "text", "text": "describe"}
        assert content[1] == {
            "type": "image_url",
            "image_url": {"url": "data:image/jpeg;base64,QUJD"},
        }

    def test_replicate_shape(self):
        config = _config(
            Capability.IMAGE_TO_TEXT, "https://api.replicate.com/v1/predictions", model="blip:123"
        )
        payload = build_payload(config, ImageToTextRequest("QUJD"))
        assert payload.json == {
            "version": "blip:123",
            "input": {"image": "data:image/jpeg;base64,QUJD"},
        }


@pytest.mark.unit
class TestTextToImagePayload:
    def test_dalle_shape(self):
        config = _config(
            Capability.TEXT_TO_IMAGE,
            "https://api.openai.com/v1/images/generations",
            model="dall-e-3",
        )
        payload = build_payload(config, TextToImageRequest("a cat", width=1024, height=768))
        assert payload.json == {
            "model": "dall-e-3",
            "prompt": "a cat",
            "n": 1,
            "size": "1024x768",
            "response_format": "url",
        }

    def test_stability_with_negative_prompt(self):
        config = _config(Capability.TEXT_TO_IMAGE, "https://api.stability.ai/v1/generation/sdxl")
        payload = build_payload(config, TextToImageRequest("a cat", negative_prompt="blurry"))
        assert payload.json == {
            "text_prompts": [
                {"text": "a cat", "weight": 1.0},
                {"text": "blurry", "weight": -1.0},
            ],
            "cfg_scale": 7,
            "steps": 30,
            "width": 1024,
            "height": 1024,
        }

    def test_stability_without_negative_prompt(self):
        config = _config(Capability.TEXT_TO_IMAGE, "https://api.stability.ai/v1/generation/sdxl")
        payload = build_payload(config, TextToImageRequest("a cat"))
        assert payload.json["text_prompts"] == [{"text": "a cat", "weight": 1.0}]

    def test_replicate_shape(self):
        config = _config(
            Capability.TEXT_TO_IMAGE, "https://api.replicate.com/v1/predictions", model="sdxl:1"
        )
        payload = build_payload(config, TextToImageRequest("a cat", steps=20))
        assert payload.json == {
            "version": "sdxl:1",
            "input": {
                "prompt": "a cat",
                "negative_prompt": "",
                "width": 1024,
                "height": 1024,
                "num_inference_steps": 20,
            },
        }

    def test_unknown_endpoint_uses_generic_shape(self):
        config = _config(Capability.TEXT_TO_IMAGE, "https://api.banana.dev/start/key")
        payload = build_payload(config, TextToImageRequest("a cat"))
        assert payload.json == {
            "prompt": "a cat",
            "negative_prompt": "",
            "width": 1024,
            "height": 1024,
            "steps": 30,
        }


@pytest.mark.unit
class TestImageToImagePayload:
    def test_stability_shape(self):
        config = _config(Capability.TEXT_TO_IMAGE, "https://api.stability.ai/v1/generation/sdxl")
        payload = build_payload(config, ImageToImageRequest("QUJD", "a dog", strength=0.4))
        assert payload.json == {
            "text_prompts": [{"text": "a dog", "weight": 1.0}],
            "init_image": "QUJD",
            "image_strength": 0.4,
            "cfg_scale": 7,
            "steps": 30,
        }

    def test_replicate_uses_data_url(self):
        config = _config(
            Capability.TEXT_TO_IMAGE, "https://api.replicate.com/v1/predictions", model="sdxl:1"
        )
        payload = build_payload(config, ImageToImageRequest("QUJD", "a dog"))
        assert payload.json["input"]["image"] == "data:image/jpeg;base64,QUJD"
        assert payload.json["input"]["strength"] == 0.75

    def test_generic_shape(self):
        config = _config(Capability.TEXT_TO_IMAGE, "https://example.com/img2img")
        payload = build_payload(config, ImageToImageRequest("QUJD", "a dog"))
        assert payload.json == {"prompt": "a dog", "init_image": "QUJD", "strength": 0.75, "steps": 30}


@pytest.mark.unit
class TestVideoPayload:
    def test_runway_image_prompt(self):
        config = _config(Capability.VIDEO, "https://api.runwayml.com/v1/generations")
        payload = build_payload(config, VideoRequest.create(prompt="waves", image_b64="QUJD"))
        assert payload.json == {"prompt": "waves", "image_prompt": "QUJD", "duration": 4}

    def test_runway_image_only_sends_empty_prompt(self):
        config = _config(Capability.VIDEO, "https://api.runwayml.com/v1/generations")
        payload = build_payload(config, VideoRequest.create(image_b64="QUJD"))
        assert payload.json == {"prompt": "", "image_prompt": "QUJD", "duration": 4}

    def test_replicate_frames_from_duration(self):
        config = _config(Capability.VIDEO, "https://api.replicate.com/v1/predictions", model="svd")
        payload = build_payload(config, VideoRequest.create(prompt="waves", duration=5))
        assert payload.json == {
            "version": "svd",
            "input": {"prompt": "waves", "fps": 24, "num_frames": 120},
        }

    def test_replicate_image_first(self):
        config = _config(Capability.VIDEO, "https://api.replicate.com/v1/predictions", model="svd")
        payload = build_payload(config, VideoRequest.create(prompt="waves", image_b64="QUJD"))
        assert list(payload.json["input"]) == ["image", "prompt", "fps", "num_frames"]

    def test_generic_shape(self):
        config = _config(Capability.VIDEO, "https://api.pika.art/generations")
        payload = build_payload(config, VideoRequest.create(prompt="waves", image_b64="QUJD"))
        assert payload.json == {"prompt": "waves", "image": "QUJD", "duration": 4}
