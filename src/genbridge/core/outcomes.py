"""
Normalized outcomes produced by the response parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

# Video statuses this package produces itself; status checks copy the provider's verbatim
STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
STATUS_UNKNOWN = "unknown"

# Provider statuses that mean the video is ready
SUCCESS_STATUSES = frozenset({"succeeded", STATUS_COMPLETED})


@dataclass(frozen=True)
class ChatOutcome:
    text: str


@dataclass(frozen=True)
class CaptionOutcome:
    text: str


class ImageKind(Enum):
    URL = "url"
    BASE64 = "base64"
    # Last resort: the provider body was not recognized and is kept verbatim.
    # It is not a usable URL and needs review before anything treats it as one.
    RAW_BODY = "raw_body"


@dataclass(frozen=True)
class ImageOutcome:
    """A generated image, either a URL or base64 data (or an unrecognized raw body)."""

    kind: ImageKind
    value: str

    @classmethod
    def from_url(cls, url: str) -> ImageOutcome:
        return cls(ImageKind.URL, url)

    @classmethod
    def from_base64(cls, data: str) -> ImageOutcome:
        return cls(ImageKind.BASE64, data)

    @classmethod
    def from_raw_body(cls, body: str) -> ImageOutcome:
        return cls(ImageKind.RAW_BODY, body)

    @property
    def url(self) -> str | None:
        return self.value if self.kind is ImageKind.URL else None

    @property
    def base64(self) -> str | None:
        return self.value if self.kind is ImageKind.BASE64 else None

    @property
    def raw_body(self) -> str | None:
        return self.value if self.kind is ImageKind.RAW_BODY else None

    @property
    def is_fallback(self) -> bool:
        return self.kind is ImageKind.RAW_BODY


@dataclass(frozen=True)
class VideoOutcome:
    """Video job state. For a pending job ``video_url`` is the status URL to poll, if any."""

    status: str
    video_url: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING

    @property
    def is_succeeded(self) -> bool:
        return self.status in SUCCESS_STATUSES and self.video_url is not None

    @property
    def is_failed(self) -> bool:
        return self.status == STATUS_FAILED


GenerationOutcome = Union[ChatOutcome, CaptionOutcome, ImageOutcome, VideoOutcome]
