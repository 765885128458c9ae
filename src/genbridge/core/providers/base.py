"""
Provider configuration values.

A ProviderConfig describes one configured endpoint. Its ProviderKind (which
wire schema the endpoint speaks) is resolved once, at construction, from the
endpoint and model strings; builders and parsers switch on the kind instead
of re-matching substrings on every call.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from genbridge.utils.exceptions import ValidationError


class Capability(Enum):
    """Operation family a provider endpoint implements."""

    CHAT = 1
    IMAGE_TO_TEXT = 2
    TEXT_TO_IMAGE = 3
    VIDEO = 4

    @classmethod
    def from_code(cls, code: int | str) -> Capability:
        """Resolve a stored integer code or a name such as 'text_to_image'."""
        if isinstance(code, int):
            try:
                return cls(code)
            except ValueError as e:
                raise ValidationError(f"Unknown capability code: {code}", field="capability") from e
        key = code.strip().upper().replace("-", "_")
        if key.isdigit():
            return cls.from_code(int(key))
        try:
            return cls[key]
        except KeyError as e:
            names = ", ".join(c.name.lower() for c in cls)
            raise ValidationError(
                f"Unknown capability {code!r}. Must be one of: {names}.", field="capability"
            ) from e

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


class ProviderKind(Enum):
    """Closed set of wire schemas the builders and parsers understand."""

    ANTHROPIC = "anthropic"
    OPENAI_CHAT = "openai_chat"
    OPENAI_VISION = "openai_vision"
    DALLE = "dalle"
    STABILITY = "stability"
    REPLICATE = "replicate"
    RUNWAY = "runway"
    GENERIC = "generic"


def resolve_provider_kind(capability: Capability, endpoint: str, model: str) -> ProviderKind:
    """Map (capability, endpoint, model) to a ProviderKind; unknown endpoints fall back to GENERIC."""
    if capability is Capability.CHAT:
        return ProviderKind.ANTHROPIC if "anthropic" in endpoint else ProviderKind.OPENAI_CHAT
    if capability is Capability.IMAGE_TO_TEXT:
        if "vision" in model or "openai" in endpoint:
            return ProviderKind.OPENAI_VISION
        return ProviderKind.REPLICATE if "replicate" in endpoint else ProviderKind.GENERIC
    if capability is Capability.TEXT_TO_IMAGE:
        if "openai.com" in endpoint and "images" in endpoint:
            return ProviderKind.DALLE
        if "stability" in endpoint:
            return ProviderKind.STABILITY
        if "replicate" in endpoint:
            return ProviderKind.REPLICATE
        return ProviderKind.GENERIC
    if "runway" in endpoint:
        return ProviderKind.RUNWAY
    if "replicate" in endpoint:
        return ProviderKind.REPLICATE
    return ProviderKind.GENERIC


def parse_headers(raw: str | Mapping[str, str] | None) -> dict[str, str]:
    """Accept headers as a mapping or as a JSON object string; empty means no headers."""
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return {str(k): str(v) for k, v in raw.items()}
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ValidationError(f"Extra headers are not valid JSON: {e}", field="extra_headers") from e
    if not isinstance(data, dict):
        raise ValidationError("Extra headers must be a JSON object", field="extra_headers")
    return {str(k): str(v) for k, v in data.items()}


@dataclass(frozen=True)
class ProviderConfig:
    """One configured provider endpoint. Immutable; use dataclasses.replace for variants."""

    name: str
    capability: Capability
    endpoint: str
    credential: str = field(default="", repr=False)
    model: str = ""
    extra_headers: Mapping[str, str] = field(default_factory=dict)
    timeout_seconds: int | None = None
    is_default: bool = False
    kind: ProviderKind | None = None
    id: str | None = None

    def __post_init__(self) -> None:
        if not self.endpoint or not self.endpoint.strip():
            raise ValidationError("Provider endpoint cannot be empty", field="endpoint")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValidationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}",
                field="timeout_seconds",
            )
        object.__setattr__(
            self, "extra_headers", MappingProxyType(parse_headers(self.extra_headers))
        )
        resolved = self.kind or resolve_provider_kind(self.capability, self.endpoint, self.model)
        object.__setattr__(self, "_provider_kind", resolved)

    @property
    def provider_kind(self) -> ProviderKind:
        """Explicit `kind` if given, else the kind resolved from endpoint and model."""
        return self._provider_kind  # type: ignore[attr-defined, no-any-return]
