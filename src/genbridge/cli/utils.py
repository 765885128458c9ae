"""
Utility functions for the CLI.

This module contains helper functions used by CLI commands,
such as provider resolution and exit code constants.
"""

import dataclasses

from genbridge import (
    Capability,
    ConfigurationError,
    ProviderConfig,
    Settings,
    ValidationError,
    get_registry,
    load_providers,
    select_default,
)
from genbridge.core.providers import find_by_name

# Exit codes (130 = common for SIGINT)
EXIT_SUCCESS = 0
EXIT_API_OR_NETWORK = 1
EXIT_VALIDATION_OR_CONFIG = 2
EXIT_POLL_TIMED_OUT = 3
EXIT_CANCELLED = 130


def resolve_provider(
    capability: Capability,
    settings: Settings,
    provider_name: str | None = None,
    preset: str | None = None,
    api_key: str | None = None,
) -> ProviderConfig:
    """
    Pick the ProviderConfig for a command.

    A preset wins over the providers file; otherwise the named provider (or the
    default for the capability) is taken from settings.providers_file. An
    explicit api_key replaces the stored credential.

    Raises:
        ValidationError: Unknown preset, missing key for a preset, or wrong capability
        ConfigurationError: Providers file problems or no provider for the capability
    """
    if preset is not None:
        if not api_key:
            raise ValidationError(
                f"Preset {preset!r} needs an API key (--api-key or GENBRIDGE_API_KEY).",
                field="api_key",
            )
        config = get_registry().create(preset, api_key)
    else:
        configs = load_providers(settings.providers_file)
        if provider_name is not None:
            found = find_by_name(configs, provider_name)
            if found is None:
                raise ConfigurationError(
                    f"Provider {provider_name!r} not found in {settings.providers_file}."
                )
            config = found
        else:
            default = select_default(configs, capability)
            if default is None:
                raise ConfigurationError(
                    f"No {capability.label} provider configured in {settings.providers_file}."
                )
            config = default
        if api_key:
            config = dataclasses.replace(config, credential=api_key)

    if config.capability is not capability:
        raise ValidationError(
            f"Provider {config.name!r} is a {config.capability.label} provider; "
            f"this command needs {capability.label}.",
            field="provider",
        )
    return config


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_API_OR_NETWORK",
    "EXIT_VALIDATION_OR_CONFIG",
    "EXIT_POLL_TIMED_OUT",
    "EXIT_CANCELLED",
    "resolve_provider",
]
