"""
Typed operation requests.

Each request class carries only the fields its operation needs. Image inputs
are base64 strings (see genbridge.core.images for encoding files).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from genbridge.core.providers.base import Capability
from genbridge.utils.exceptions import ValidationError

# Defaults used by the client when the caller does not override them
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 1024
DEFAULT_STEPS = 30
DEFAULT_STRENGTH = 0.75
DEFAULT_VIDEO_DURATION = 4
DEFAULT_CAPTION_PROMPT = (
    "Describe this image in detail, including the scene, objects, style and lighting, "
    "and write an English prompt suitable for AI image generation."
)


class Operation(Enum):
    """What a single round trip does; selects the parser branch."""

    CHAT = "chat"
    IMAGE_TO_TEXT = "image_to_text"
    TEXT_TO_IMAGE = "text_to_image"
    IMAGE_TO_IMAGE = "image_to_image"
    VIDEO = "video"
    VIDEO_STATUS = "video_status"


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str


@dataclass(frozen=True)
class ChatRequest:
    messages: tuple[ChatMessage, ...]
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    operation: ClassVar[Operation] = Operation.CHAT
    capability: ClassVar[Capability] = Capability.CHAT


@dataclass(frozen=True)
class ImageToTextRequest:
    image_b64: str
    prompt: str = DEFAULT_CAPTION_PROMPT

    operation: ClassVar[Operation] = Operation.IMAGE_TO_TEXT
    capability: ClassVar[Capability] = Capability.IMAGE_TO_TEXT


@dataclass(frozen=True)
class TextToImageRequest:
    prompt: str
    negative_prompt: str = ""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    steps: int = DEFAULT_STEPS

    operation: ClassVar[Operation] = Operation.TEXT_TO_IMAGE
    capability: ClassVar[Capability] = Capability.TEXT_TO_IMAGE


@dataclass(frozen=True)
class ImageToImageRequest:
    image_b64: str
    prompt: str
    strength: float = DEFAULT_STRENGTH
    steps: int = DEFAULT_STEPS

    operation: ClassVar[Operation] = Operation.IMAGE_TO_IMAGE
    capability: ClassVar[Capability] = Capability.TEXT_TO_IMAGE


# Video input: a prompt, an image, or both. Never neither.


@dataclass(frozen=True)
class PromptSource:
    prompt: str

    @property
    def image_b64(self) -> None:
        return None


@dataclass(frozen=True)
class ImageSource:
    image_b64: str

    @property
    def prompt(self) -> None:
        return None


@dataclass(frozen=True)
class PromptAndImageSource:
    prompt: str
    image_b64: str


VideoSource = Union[PromptSource, ImageSource, PromptAndImageSource]


@dataclass(frozen=True)
class VideoRequest:
    source: VideoSource
    duration: int = DEFAULT_VIDEO_DURATION

    operation: ClassVar[Operation] = Operation.VIDEO
    capability: ClassVar[Capability] = Capability.VIDEO

    @classmethod
    def create(
        cls,
        prompt: str | None = None,
        image_b64: str | None = None,
        duration: int = DEFAULT_VIDEO_DURATION,
    ) -> VideoRequest:
        """Build a request from optional prompt/image. Raises ValidationError when both are missing."""
        has_prompt = bool(prompt and prompt.strip())
        if duration <= 0:
            raise ValidationError(f"Duration must be positive, got {duration}", field="duration")
        source: VideoSource
        if has_prompt and image_b64:
            source = PromptAndImageSource(prompt=prompt, image_b64=image_b64)  # type: ignore[arg-type]
        elif has_prompt:
            source = PromptSource(prompt=prompt)  # type: ignore[arg-type]
        elif image_b64:
            source = ImageSource(image_b64=image_b64)
        else:
            raise ValidationError(
                "Video generation needs a prompt, a source image, or both", field="prompt"
            )
        return cls(source=source, duration=duration)


OperationRequest = Union[
    ChatRequest, ImageToTextRequest, TextToImageRequest, ImageToImageRequest, VideoRequest
]
