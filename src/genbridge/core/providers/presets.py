"""
Built-in provider presets.

Each factory takes an API key and returns a ProviderConfig for a well-known
endpoint. Presets are registered under their ids by the providers package.
"""

from genbridge.core.providers.base import Capability, ProviderConfig

BANANA_PLACEHOLDER_MODEL_KEY = "your-model-key"


def openai_gpt4(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="OpenAI GPT-4",
        capability=Capability.CHAT,
        endpoint="https://api.openai.com/v1/chat/completions",
        credential=api_key,
        model="gpt-4",
    )


def claude_3(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="Claude 3",
        capability=Capability.CHAT,
        endpoint="https://api.anthropic.com/v1/messages",
        credential=api_key,
        model="claude-3-opus-20240229",
        extra_headers={"anthropic-version": "2023-06-01"},
    )


def comfly_chat(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="Comfly Chat",
        capability=Capability.CHAT,
        endpoint="https://ai.comfly.chat/v1/chat/completions",
        credential=api_key,
        model="gpt-4",
    )


def replicate_blip(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="Replicate BLIP",
        capability=Capability.IMAGE_TO_TEXT,
        endpoint="https://api.replicate.com/v1/predictions",
        credential=api_key,
        model="salesforce/blip:2e1dddc8621f72155f24cf2e0adbde548458d3cab9f00c0139eea840d0ac4746",
    )


def openai_vision(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="OpenAI Vision",
        capability=Capability.IMAGE_TO_TEXT,
        endpoint="https://api.openai.com/v1/chat/completions",
        credential=api_key,
        model="gpt-4-vision-preview",
    )


def dalle_3(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="DALL-E 3",
        capability=Capability.TEXT_TO_IMAGE,
        endpoint="https://api.openai.com/v1/images/generations",
        credential=api_key,
        model="dall-e-3",
    )


def stability_sdxl(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="Stability AI",
        capability=Capability.TEXT_TO_IMAGE,
        endpoint="https://api.stability.ai/v1/generation/stable-diffusion-xl-1024-v1-0/text-to-image",
        credential=api_key,
        model="stable-diffusion-xl-1024-v1-0",
        extra_headers={"Accept": "application/json"},
    )


def banana_dev(api_key: str, model_key: str = BANANA_PLACEHOLDER_MODEL_KEY) -> ProviderConfig:
    """Banana.dev endpoints are per model; the model key is part of the URL."""
    return ProviderConfig(
        name="Banana.dev",
        capability=Capability.TEXT_TO_IMAGE,
        endpoint=f"https://api.banana.dev/start/{model_key}",
        credential=api_key,
        model=model_key,
    )


def runway_gen2(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="Runway Gen-2",
        capability=Capability.VIDEO,
        endpoint="https://api.runwayml.com/v1/generations",
        credential=api_key,
        model="gen2",
    )


def pika(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="Pika Labs",
        capability=Capability.VIDEO,
        endpoint="https://api.pika.art/generations",
        credential=api_key,
        model="pika",
    )


def replicate_video(api_key: str) -> ProviderConfig:
    return ProviderConfig(
        name="Replicate Video",
        capability=Capability.VIDEO,
        endpoint="https://api.replicate.com/v1/predictions",
        credential=api_key,
        model="stability-ai/stable-video-diffusion",
    )


BUILTIN_PRESETS = {
    "openai-gpt4": openai_gpt4,
    "claude-3": claude_3,
    "comfly-chat": comfly_chat,
    "replicate-blip": replicate_blip,
    "openai-vision": openai_vision,
    "dalle-3": dalle_3,
    "stability-sdxl": stability_sdxl,
    "banana-dev": banana_dev,
    "runway-gen2": runway_gen2,
    "pika": pika,
    "replicate-video": replicate_video,
}
