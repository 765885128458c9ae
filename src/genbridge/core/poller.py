"""
Polling of long-running video jobs.

A provider that cannot finish a video within one request answers with a
pending outcome and a status URL. AsyncJobPoller re-checks that URL at a
fixed interval until the job succeeds, fails, the attempt limit runs out
or the caller cancels. Only the wait between checks is interruptible; no
server-side cancellation is sent.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from genbridge.core.client import GenerationClient, ImageInput
from genbridge.core.config import Settings
from genbridge.core.media import MediaFetcher, MediaKind
from genbridge.core.operations import DEFAULT_VIDEO_DURATION
from genbridge.core.outcomes import VideoOutcome
from genbridge.core.providers.base import ProviderConfig
from genbridge.logging_config import get_logger
from genbridge.utils.exceptions import CancellationError, ParseError
from genbridge.utils.result import Err, Ok, Result

logger = get_logger(__name__)

_CANCEL_POLL_INTERVAL = 0.25

# (attempt, max_attempts, status) after every status check
AttemptCallback = Callable[[int, int, str], None]


class PollState(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class JobHandle:
    """Where to check a pending job, and with which provider's credentials."""

    status_url: str
    provider: ProviderConfig

    @classmethod
    def from_outcome(cls, outcome: VideoOutcome, provider: ProviderConfig) -> JobHandle | None:
        """Handle for a pending outcome that carries a status URL; None otherwise."""
        if outcome.is_pending and outcome.video_url:
            return cls(outcome.video_url, provider)
        return None


@dataclass(frozen=True)
class PollResult:
    state: PollState
    attempts: int
    video_url: str | None = None
    local_path: Path | None = None
    message: str = ""

    @property
    def terminal(self) -> bool:
        return self.state is not PollState.PENDING

    @property
    def recoverable(self) -> bool:
        """A timed-out job may still finish; the caller can check the status URL again later."""
        return self.state is PollState.TIMED_OUT


class AsyncJobPoller:
    """Polls a video job's status URL until a terminal state."""

    def __init__(
        self,
        client: GenerationClient,
        settings: Settings | None = None,
        interval: float | None = None,
        max_attempts: int | None = None,
        fetcher: MediaFetcher | None = None,
        cancel_check: Callable[[], bool] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """
        Args:
            client: Client used for the status checks
            settings: Source of the default interval and attempt limit (client's settings if None)
            interval: Seconds to wait before each status check
            max_attempts: Status checks before giving up with TIMED_OUT
            fetcher: Downloads the finished video when a destination directory is given
            cancel_check: Returns True to abandon polling; defaults to the client's cancel_check
            sleep: Replaces the wait between checks (tests pass a no-op to simulate time)
        """
        self.client = client
        self.settings = settings or client.settings
        self.interval = self.settings.poll_interval if interval is None else interval
        self.max_attempts = self.settings.poll_max_attempts if max_attempts is None else max_attempts
        self.fetcher = fetcher or MediaFetcher(self.settings)
        self.cancel_check = cancel_check or client.cancel_check
        self._sleep = sleep

    def _cancelled(self) -> bool:
        return self.cancel_check is not None and bool(self.cancel_check())

    def _wait(self) -> bool:
        """Wait one interval. Returns True if the caller cancelled meanwhile."""
        if self._sleep is not None:
            self._sleep(self.interval)
            return self._cancelled()
        if self.cancel_check is None:
            time.sleep(self.interval)
            return False
        deadline = time.monotonic() + self.interval
        while True:
            if self._cancelled():
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(_CANCEL_POLL_INTERVAL, remaining))

    def poll(
        self,
        handle: JobHandle,
        destination_dir: str | Path | None = None,
        on_attempt: AttemptCallback | None = None,
    ) -> PollResult:
        """
        Check the job until it completes, fails, times out or is cancelled.

        A status check that errors counts as an attempt and leaves the job
        pending. On completion the video is downloaded into destination_dir
        when one is given.
        """
        logger.info(
            "Polling video job provider=%s every %.1fs (max %d attempts)",
            handle.provider.name,
            self.interval,
            self.max_attempts,
        )
        attempts = 0
        while attempts < self.max_attempts:
            if self._wait():
                return self._cancelled_result(attempts)
            attempts += 1
            result = self.client.check_video_status(handle.provider, handle.status_url)
            outcome: VideoOutcome | None = None
            if isinstance(result, Ok) and isinstance(result.value, VideoOutcome):
                outcome = result.value
                status = outcome.status
            elif isinstance(result, Err) and result.kind == CancellationError.kind:
                return self._cancelled_result(attempts)
            else:
                status = "error"
                reason = result.message if isinstance(result, Err) else "unexpected outcome"
                logger.warning("Status check %d failed: %s", attempts, reason)
            logger.debug("Status check %d/%d status=%s", attempts, self.max_attempts, status)
            if on_attempt is not None:
                on_attempt(attempts, self.max_attempts, status)

            if outcome is not None and outcome.is_succeeded:
                assert outcome.video_url is not None
                return complete_video(self.fetcher, outcome.video_url, attempts, destination_dir)
            if outcome is not None and outcome.is_failed:
                logger.info("Video job failed after %d checks", attempts)
                return PollResult(
                    PollState.FAILED, attempts, message="Video generation failed"
                )

        logger.info("Video job still pending after %d checks", attempts)
        return PollResult(
            PollState.TIMED_OUT,
            attempts,
            message=(
                f"Video is still processing after {attempts} checks. "
                f"Check again later: {handle.status_url}"
            ),
        )

    def _cancelled_result(self, attempts: int) -> PollResult:
        logger.info("Polling cancelled after %d checks", attempts)
        return PollResult(PollState.CANCELLED, attempts, message="Polling was cancelled")


def complete_video(
    fetcher: MediaFetcher,
    video_url: str,
    attempts: int,
    destination_dir: str | Path | None,
) -> PollResult:
    """COMPLETED result, downloading the video first when destination_dir is given."""
    if destination_dir is None:
        return PollResult(PollState.COMPLETED, attempts, video_url=video_url, message="Video ready")
    saved = fetcher.fetch(video_url, destination_dir, MediaKind.VIDEO)
    if isinstance(saved, Err):
        return PollResult(
            PollState.COMPLETED,
            attempts,
            video_url=video_url,
            message=f"Video ready but download failed: {saved.message}",
        )
    return PollResult(
        PollState.COMPLETED,
        attempts,
        video_url=video_url,
        local_path=saved.value,
        message="Video saved",
    )


def run_video_job(
    client: GenerationClient,
    config: ProviderConfig,
    prompt: str | None = None,
    image: ImageInput | None = None,
    duration: int = DEFAULT_VIDEO_DURATION,
    destination_dir: str | Path | None = None,
    poller: AsyncJobPoller | None = None,
    on_attempt: AttemptCallback | None = None,
) -> Result[PollResult]:
    """
    Start a video job and carry it to a terminal state.

    A video returned immediately is downloaded right away; a pending job is
    handed to the poller. Errors from the initial request, or a pending job
    without a status URL, are returned as Err.
    """
    poller = poller or AsyncJobPoller(client)
    started = client.generate_video(config, prompt=prompt, image=image, duration=duration)
    if isinstance(started, Err):
        return started
    outcome = started.value
    if not isinstance(outcome, VideoOutcome):
        return Err("Unexpected outcome for a video request", ParseError(repr(outcome)))
    if outcome.is_succeeded:
        assert outcome.video_url is not None
        return Ok(complete_video(poller.fetcher, outcome.video_url, 0, destination_dir))
    handle = JobHandle.from_outcome(outcome, config)
    if handle is None:
        message = "Provider accepted the video job but returned no status URL to poll"
        return Err(message, ParseError(message))
    return Ok(poller.poll(handle, destination_dir=destination_dir, on_attempt=on_attempt))


__all__ = [
    "AsyncJobPoller",
    "AttemptCallback",
    "JobHandle",
    "PollResult",
    "PollState",
    "complete_video",
    "run_video_job",
]
