"""
genbridge - one client for many generative-AI HTTP APIs

Chat, image captioning, text-to-image, image-to-image and video generation
across OpenAI, Anthropic, Stability, Replicate, Runway and OpenAI-compatible
endpoints. Every call returns a Result (Ok or Err) instead of raising.

Library usage:
- Describe an endpoint with ProviderConfig (or a preset from get_registry()) and call
  GenerationClient methods with it.
- Settings (timeouts, polling, output directory) can be passed to the client or
  shared via get_settings() / set_settings().
- Pending video jobs: JobHandle.from_outcome(...) and AsyncJobPoller, or run_video_job().
- Logging: control verbosity with set_verbosity(0|1|2) or configure_logging(verbose_level, quiet);
  GENBRIDGE_VERBOSITY env (0/1/2) is read when CLI runs or when logging is configured.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("genbridge")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source in development)
    __version__ = "0.0.0.dev"

__author__ = "codeprimate"

from genbridge.core.client import GenerationClient
from genbridge.core.config import Settings, get_settings, set_settings
from genbridge.core.media import MediaFetcher, MediaKind
from genbridge.core.operations import (
    ChatMessage,
    ChatRequest,
    ImageSource,
    ImageToImageRequest,
    ImageToTextRequest,
    PromptAndImageSource,
    PromptSource,
    TextToImageRequest,
    VideoRequest,
)
from genbridge.core.outcomes import (
    CaptionOutcome,
    ChatOutcome,
    ImageKind,
    ImageOutcome,
    VideoOutcome,
)
from genbridge.core.poller import AsyncJobPoller, JobHandle, PollResult, PollState, run_video_job
from genbridge.core.providers import (
    Capability,
    ProviderConfig,
    ProviderKind,
    get_registry,
    load_providers,
    select_default,
)
from genbridge.logging_config import configure_logging, set_verbosity
from genbridge.utils.exceptions import (
    CancellationError,
    ConfigurationError,
    GenbridgeError,
    HttpStatusError,
    ImageProcessingError,
    ParseError,
    RequestTimeoutError,
    StorageError,
    TransportError,
    ValidationError,
)
from genbridge.utils.result import Err, Ok, Result

__all__ = [
    "AsyncJobPoller",
    "CancellationError",
    "Capability",
    "CaptionOutcome",
    "ChatMessage",
    "ChatOutcome",
    "ChatRequest",
    "ConfigurationError",
    "Err",
    "GenbridgeError",
    "GenerationClient",
    "HttpStatusError",
    "ImageKind",
    "ImageOutcome",
    "ImageProcessingError",
    "ImageSource",
    "ImageToImageRequest",
    "ImageToTextRequest",
    "JobHandle",
    "MediaFetcher",
    "MediaKind",
    "Ok",
    "ParseError",
    "PollResult",
    "PollState",
    "PromptAndImageSource",
    "PromptSource",
    "ProviderConfig",
    "ProviderKind",
    "RequestTimeoutError",
    "Result",
    "Settings",
    "StorageError",
    "TextToImageRequest",
    "TransportError",
    "ValidationError",
    "VideoOutcome",
    "VideoRequest",
    "configure_logging",
    "get_registry",
    "get_settings",
    "load_providers",
    "run_video_job",
    "select_default",
    "set_settings",
    "set_verbosity",
]
