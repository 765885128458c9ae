#!/usr/bin/env python
"""
Check a provider connection with one small request.

Usage:
    python scripts/test_api.py [provider-name]

Uses the providers file (GENBRIDGE_PROVIDERS_FILE). Without a name, the
default chat provider is tried.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from genbridge import (
    Capability,
    ChatMessage,
    Err,
    GenerationClient,
    get_settings,
    load_providers,
    select_default,
)
from genbridge.core.providers import find_by_name


def main() -> None:
    """Send one request to the selected provider and report the outcome."""
    settings = get_settings()
    print(f"Loading providers from {settings.providers_file}...")

    try:
        configs = load_providers(settings.providers_file)
    except Exception as e:
        print(f"❌ {e}")
        sys.exit(1)

    if len(sys.argv) > 1:
        config = find_by_name(configs, sys.argv[1])
    else:
        config = select_default(configs, Capability.CHAT)
    if config is None:
        print("❌ No matching provider configured")
        sys.exit(1)

    print(f"✓ Provider: {config.name} ({config.capability.label}, {config.provider_kind.value})")
    print(f"  - Endpoint: {config.endpoint}")
    print()

    client = GenerationClient(settings)
    if config.capability is Capability.CHAT:
        result = client.chat(config, [ChatMessage("user", "Reply with the single word: pong")])
    elif config.capability is Capability.TEXT_TO_IMAGE:
        print("Testing image generation (this may take 10-30 seconds)...")
        result = client.text_to_image(config, "a simple test image: blue circle on white background")
    else:
        print(f"❌ No quick check for {config.capability.label} providers")
        sys.exit(1)

    if isinstance(result, Err):
        print(f"❌ Request failed ({result.kind}): {result.message}")
        sys.exit(1)

    print(f"✓ Outcome: {result.value!r:.200}")
    print()
    print("✅ Provider is working correctly.")


if __name__ == "__main__":
    main()
