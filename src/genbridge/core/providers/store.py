"""
Load provider configs from a YAML file and pick defaults.

The file holds a top-level ``providers`` list; each entry is validated with
pydantic before it becomes a ProviderConfig. Credentials can be written
inline (``api_key``) or read from an environment variable (``credential_env``).
"""

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from genbridge.core.providers.base import Capability, ProviderConfig, ProviderKind
from genbridge.logging_config import get_logger
from genbridge.utils.exceptions import ConfigurationError, GenbridgeError

logger = get_logger(__name__)


class ProviderEntry(BaseModel):
    """Schema for one entry of the providers file."""

    name: str = Field(..., min_length=1)
    capability: int | str = Field(..., description="Capability code 1-4 or name, e.g. 'chat'")
    endpoint: str = Field(..., min_length=1)
    api_key: str = ""
    credential_env: str | None = Field(
        default=None, description="Environment variable holding the API key"
    )
    model: str = ""
    headers: dict[str, str] | str | None = None
    timeout_seconds: int | None = Field(default=None, gt=0)
    is_default: bool = False
    kind: str | None = None
    id: str | None = None


class ProvidersFile(BaseModel):
    """Schema for the providers YAML file."""

    model_config = {"extra": "allow"}

    providers: list[ProviderEntry]


def _to_config(entry: ProviderEntry) -> ProviderConfig:
    credential = entry.api_key
    if entry.credential_env:
        credential = os.getenv(entry.credential_env, "")
        if not credential:
            raise ConfigurationError(
                f"Provider {entry.name!r}: environment variable {entry.credential_env} is not set."
            )
    try:
        kind = ProviderKind(entry.kind) if entry.kind else None
    except ValueError as e:
        names = ", ".join(k.value for k in ProviderKind)
        raise ConfigurationError(
            f"Provider {entry.name!r}: unknown kind {entry.kind!r}. Must be one of: {names}."
        ) from e
    try:
        return ProviderConfig(
            name=entry.name,
            capability=Capability.from_code(entry.capability),
            endpoint=entry.endpoint,
            credential=credential,
            model=entry.model,
            extra_headers=entry.headers,  # type: ignore[arg-type]
            timeout_seconds=entry.timeout_seconds,
            is_default=entry.is_default,
            kind=kind,
            id=entry.id,
        )
    except GenbridgeError as e:
        raise ConfigurationError(f"Provider {entry.name!r}: {e}") from e


def load_providers(path: str | Path) -> list[ProviderConfig]:
    """
    Read and validate a providers YAML file.

    Returns:
        ProviderConfig values in file order.

    Raises:
        ConfigurationError: If the file is missing, malformed, or fails validation.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Providers file not found: {path}. Set GENBRIDGE_PROVIDERS_FILE or use --preset."
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read providers file {path}: {e}") from e

    try:
        data: Any = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse {path}: {e}. Check YAML syntax and formatting."
        ) from e

    if data is None:
        raise ConfigurationError(f"{path} is empty. Expected a 'providers' list.")
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must be a mapping with a 'providers' list.")

    try:
        parsed = ProvidersFile(**data)
    except ValidationError as e:
        errors = "\n".join(
            f"  - {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid providers file {path}:\n{errors}") from e

    configs = [_to_config(entry) for entry in parsed.providers]
    logger.debug("Loaded %d provider(s) from %s", len(configs), path)
    return configs


def select_default(
    configs: Iterable[ProviderConfig], capability: Capability
) -> ProviderConfig | None:
    """First config of the capability marked is_default, else the first of that capability."""
    first: ProviderConfig | None = None
    for config in configs:
        if config.capability is not capability:
            continue
        if config.is_default:
            return config
        if first is None:
            first = config
    return first


def find_by_name(configs: Iterable[ProviderConfig], name: str) -> ProviderConfig | None:
    """Config whose name (or id) matches, case-insensitively."""
    wanted = name.strip().lower()
    for config in configs:
        if config.name.lower() == wanted or (config.id is not None and config.id.lower() == wanted):
            return config
    return None
