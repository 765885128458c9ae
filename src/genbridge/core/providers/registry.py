"""
Registry for provider presets.

Maps preset ids (e.g. "dalle-3", "runway-gen2") to factories that build a
ready ProviderConfig from an API key.
"""

from collections.abc import Callable

from genbridge.core.providers.base import ProviderConfig
from genbridge.utils.exceptions import ValidationError

PresetFactory = Callable[[str], ProviderConfig]

# Placeholder used when listing presets without a real key
PLACEHOLDER_API_KEY = "your-api-key"


class PresetRegistry:
    """Registry mapping preset id to a ProviderConfig factory."""

    def __init__(self) -> None:
        self._factories: dict[str, PresetFactory] = {}

    def register(self, preset_id: str, factory: PresetFactory) -> None:
        """Register a preset factory. Idempotent for the same id."""
        self._factories[preset_id] = factory

    def get(self, preset_id: str) -> PresetFactory | None:
        """Return the registered factory for preset_id, or None if unknown."""
        return self._factories.get(preset_id)

    def preset_ids(self) -> list[str]:
        """Return the list of registered preset ids, in registration order."""
        return list(self._factories.keys())

    def create(self, preset_id: str, api_key: str) -> ProviderConfig:
        """
        Build the ProviderConfig for a preset.

        Raises:
            ValidationError: If the preset id is unknown
        """
        factory = self.get(preset_id)
        if factory is None:
            known = ", ".join(self.preset_ids())
            raise ValidationError(
                f"Unknown preset {preset_id!r}. Known presets: {known}.", field="preset"
            )
        return factory(api_key)

    def all_presets(self, api_key: str = PLACEHOLDER_API_KEY) -> list[tuple[str, ProviderConfig]]:
        """Every preset built with the given key, as (preset_id, config) pairs."""
        return [(preset_id, factory(api_key)) for preset_id, factory in self._factories.items()]


_registry: PresetRegistry | None = None


def get_registry() -> PresetRegistry:
    """Return the global preset registry. Creates it on first call."""
    global _registry
    if _registry is None:
        _registry = PresetRegistry()
    return _registry
