"""
Provider configuration: capability and kind resolution, presets, and the providers file.

Built-in presets are registered lazily on first get_registry() call.
"""

from genbridge.core.providers.base import Capability as Capability
from genbridge.core.providers.base import ProviderConfig as ProviderConfig
from genbridge.core.providers.base import ProviderKind as ProviderKind
from genbridge.core.providers.base import parse_headers as parse_headers
from genbridge.core.providers.base import resolve_provider_kind as resolve_provider_kind
from genbridge.core.providers.registry import (
    PresetRegistry,
)
from genbridge.core.providers.registry import (
    get_registry as _get_registry_impl,
)
from genbridge.core.providers.store import find_by_name as find_by_name
from genbridge.core.providers.store import load_providers as load_providers
from genbridge.core.providers.store import select_default as select_default

_builtins_registered = False


def _register_builtins(reg: PresetRegistry) -> None:
    """Register built-in presets. Called once when registry is first used."""
    global _builtins_registered
    if _builtins_registered:
        return
    from genbridge.core.providers.presets import BUILTIN_PRESETS

    for preset_id, factory in BUILTIN_PRESETS.items():
        reg.register(preset_id, factory)
    _builtins_registered = True


def get_registry() -> PresetRegistry:
    """Return the global preset registry and ensure built-ins are registered."""
    reg = _get_registry_impl()
    _register_builtins(reg)
    return reg
