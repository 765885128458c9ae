"""
Click command definitions for the genbridge CLI.

This module contains the Click command group and all CLI commands
(chat, caption, image, video, status, presets).
"""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from genbridge import (
    AsyncJobPoller,
    CancellationError,
    Capability,
    ChatMessage,
    GenbridgeError,
    GenerationClient,
    MediaFetcher,
    PollState,
    ProviderConfig,
    Result,
    Settings,
    __version__,
    get_registry,
    run_video_job,
)
from genbridge.cli import progress
from genbridge.cli.handlers import (
    cancel_check,
    install_sigint_handler,
    reset_cancellation,
    restore_sigint_handler,
    run_with_error_handling,
)
from genbridge.cli.utils import EXIT_POLL_TIMED_OUT, resolve_provider
from genbridge.core.operations import (
    DEFAULT_CAPTION_PROMPT,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_STEPS,
    DEFAULT_STRENGTH,
    DEFAULT_TEMPERATURE,
    DEFAULT_VIDEO_DURATION,
    DEFAULT_WIDTH,
)
from genbridge.logging_config import configure_logging, get_verbosity_from_env

F = TypeVar("F", bound=Callable[..., Any])


def provider_options(fn: F) -> F:
    """Options shared by every command that calls a provider."""
    options = [
        click.option(
            "--provider",
            "provider_name",
            help="Provider name (or id) from the providers file (default: the capability's default).",
        ),
        click.option(
            "--preset",
            help="Built-in preset id instead of the providers file (see `genbridge presets`).",
        ),
        click.option(
            "--api-key",
            envvar="GENBRIDGE_API_KEY",
            help="API key (overrides the stored credential; required with --preset).",
        ),
        click.option(
            "--quiet",
            "-q",
            is_flag=True,
            help="Minimize progress messages; only print the result or errors.",
        ),
        click.option(
            "--verbose",
            "-v",
            "verbose_count",
            count=True,
            help="Increase verbosity: -v also show prompts, -vv show API detail.",
        ),
        click.option(
            "--debug-api",
            is_flag=True,
            help="Log raw API request payload and response (image data truncated) for debugging.",
        ),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _configure(quiet: bool, verbose_count: int) -> None:
    # Reset cancel event for this run (in case CLI is invoked again in same process)
    reset_cancellation()
    # CLI flags override GENBRIDGE_VERBOSITY
    verbose_level = min(verbose_count, 2) if verbose_count > 0 else get_verbosity_from_env()
    configure_logging(verbose_level=verbose_level, quiet=quiet)


def _load_settings(debug_api: bool) -> Settings:
    settings = Settings.from_env()
    if debug_api:
        settings.debug_api = True
    settings.validate()
    return settings


def _run(fn: Callable[[], None], quiet: bool) -> None:
    # Install SIGINT handler for cancellation
    old_sigint = install_sigint_handler()
    try:
        run_with_error_handling(fn, quiet=quiet)
    finally:
        restore_sigint_handler(old_sigint)


def _call(action: str, provider: ProviderConfig, quiet: bool, fn: Callable[[], Result]) -> Any:
    """Run one client call (with a spinner unless quiet) and unwrap its result."""
    if quiet:
        return fn().unwrap()
    with progress.operation_progress(action, provider):
        result = fn()
    return result.unwrap()


@click.group(
    help=f"""One client for many generative-AI HTTP APIs: chat, captions, images and video.

\b
Version: {__version__}
Providers file: GENBRIDGE_PROVIDERS_FILE (default providers.yaml)
"""
)
@click.version_option(version=__version__, package_name="genbridge")
@click.pass_context
def cli(ctx: click.Context) -> None:
    ctx.color = True


@cli.command()
@click.option("--prompt", "-p", required=True, help="Message to send.")
@click.option(
    "--temperature", type=float, default=DEFAULT_TEMPERATURE, show_default=True, help="Sampling temperature."
)
@click.option(
    "--max-tokens", type=int, default=DEFAULT_MAX_TOKENS, show_default=True, help="Reply length limit."
)
@provider_options
def chat(
    prompt: str,
    temperature: float,
    max_tokens: int,
    provider_name: str | None,
    preset: str | None,
    api_key: str | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Send a chat message and print the reply."""
    _configure(quiet, verbose_count)

    def do_chat() -> None:
        settings = _load_settings(debug_api)
        config = resolve_provider(Capability.CHAT, settings, provider_name, preset, api_key)
        client = GenerationClient(settings, cancel_check=cancel_check)
        messages = [ChatMessage("user", prompt)]
        outcome = _call(
            "Waiting for reply",
            config,
            quiet,
            lambda: client.chat(config, messages, temperature=temperature, max_tokens=max_tokens),
        )
        click.echo(outcome.text)

    _run(do_chat, quiet)


@cli.command()
@click.option(
    "--image",
    "-i",
    "image_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Image to describe.",
)
@click.option("--prompt", "-p", default=DEFAULT_CAPTION_PROMPT, help="Captioning instruction.")
@provider_options
def caption(
    image_path: Path,
    prompt: str,
    provider_name: str | None,
    preset: str | None,
    api_key: str | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Describe an image and print the caption."""
    _configure(quiet, verbose_count)

    def do_caption() -> None:
        settings = _load_settings(debug_api)
        config = resolve_provider(Capability.IMAGE_TO_TEXT, settings, provider_name, preset, api_key)
        client = GenerationClient(settings, cancel_check=cancel_check)
        outcome = _call(
            "Describing image",
            config,
            quiet,
            lambda: client.image_to_text(config, image_path, prompt=prompt),
        )
        click.echo(outcome.text)

    _run(do_caption, quiet)


@cli.command()
@click.option("--prompt", "-p", required=True, help="Text description of the image to generate.")
@click.option("--negative-prompt", "-n", default="", help="What to avoid (text-to-image only).")
@click.option(
    "--reference",
    "-r",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Reference image; switches to image-to-image.",
)
@click.option(
    "--strength",
    type=float,
    default=DEFAULT_STRENGTH,
    show_default=True,
    help="How far to move away from the reference image.",
)
@click.option("--width", type=int, default=DEFAULT_WIDTH, show_default=True)
@click.option("--height", type=int, default=DEFAULT_HEIGHT, show_default=True)
@click.option("--steps", type=int, default=DEFAULT_STEPS, show_default=True)
@click.option(
    "--out-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the saved image (default: GENBRIDGE_OUTPUT_DIR).",
)
@provider_options
def image(
    prompt: str,
    negative_prompt: str,
    reference: Path | None,
    strength: float,
    width: int,
    height: int,
    steps: int,
    out_dir: Path | None,
    provider_name: str | None,
    preset: str | None,
    api_key: str | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Generate an image from a prompt (or from a reference image and a prompt)."""
    _configure(quiet, verbose_count)

    def do_image() -> None:
        settings = _load_settings(debug_api)
        config = resolve_provider(Capability.TEXT_TO_IMAGE, settings, provider_name, preset, api_key)
        client = GenerationClient(settings, cancel_check=cancel_check)

        if reference is not None:
            outcome = _call(
                "Generating image",
                config,
                quiet,
                lambda: client.image_to_image(
                    config, reference, prompt, strength=strength, steps=steps
                ),
            )
        else:
            outcome = _call(
                "Generating image",
                config,
                quiet,
                lambda: client.text_to_image(
                    config,
                    prompt,
                    negative_prompt=negative_prompt,
                    width=width,
                    height=height,
                    steps=steps,
                ),
            )

        fetcher = MediaFetcher(settings)
        saved = _call("Saving image", config, quiet, lambda: fetcher.save_outcome(outcome, out_dir))

        if not quiet:
            rows = [
                ("Saved to", f"[bold green]{saved}[/bold green]"),
                ("Provider", config.name),
                ("Prompt", f"[dim]{prompt}[/dim]"),
            ]
            if reference is not None:
                rows.append(("Reference", str(reference)))
            progress.print_success_result("Image Generated", rows)
        # Print path to stdout for scriptability
        click.echo(str(saved))

    _run(do_image, quiet)


@cli.command()
@click.option("--prompt", "-p", help="Text description of the video.")
@click.option(
    "--image",
    "-i",
    "image_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Source image to animate.",
)
@click.option(
    "--duration", type=int, default=DEFAULT_VIDEO_DURATION, show_default=True, help="Seconds."
)
@click.option(
    "--out-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the downloaded video (default: GENBRIDGE_OUTPUT_DIR).",
)
@click.option("--no-download", is_flag=True, help="Only print the video URL.")
@provider_options
def video(
    prompt: str | None,
    image_path: Path | None,
    duration: int,
    out_dir: Path | None,
    no_download: bool,
    provider_name: str | None,
    preset: str | None,
    api_key: str | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Generate a video, wait for the job to finish and download it."""
    _configure(quiet, verbose_count)

    def do_video() -> None:
        settings = _load_settings(debug_api)
        config = resolve_provider(Capability.VIDEO, settings, provider_name, preset, api_key)
        client = GenerationClient(settings, cancel_check=cancel_check)
        poller = AsyncJobPoller(client, settings)
        destination = None if no_download else (out_dir or settings.output_dir)

        def start(on_attempt: Callable[[int, int, str], None] | None) -> Result:
            return run_video_job(
                client,
                config,
                prompt=prompt,
                image=image_path,
                duration=duration,
                destination_dir=destination,
                poller=poller,
                on_attempt=on_attempt,
            )

        if quiet:
            poll = start(None).unwrap()
        else:
            with progress.poll_progress(poller.max_attempts) as on_attempt:
                result = start(on_attempt)
            poll = result.unwrap()

        if poll.state is PollState.CANCELLED:
            raise CancellationError(poll.message)
        if poll.state is PollState.FAILED:
            raise GenbridgeError(poll.message)
        if poll.state is PollState.TIMED_OUT:
            if quiet:
                click.echo(poll.message, err=True)
            else:
                progress.print_warning(poll.message)
            sys.exit(EXIT_POLL_TIMED_OUT)

        if destination is not None and poll.local_path is None:
            if quiet:
                click.echo(poll.message, err=True)
            else:
                progress.print_warning(poll.message)
        output = str(poll.local_path) if poll.local_path is not None else str(poll.video_url)
        if not quiet:
            rows = [("Video", f"[bold green]{output}[/bold green]"), ("Provider", config.name)]
            if poll.attempts:
                rows.append(("Status checks", str(poll.attempts)))
            progress.print_success_result("Video Generated", rows)
        click.echo(output)

    _run(do_video, quiet)


@cli.command()
@click.option("--url", "-u", "status_url", required=True, help="Status URL of a pending video job.")
@provider_options
def status(
    status_url: str,
    provider_name: str | None,
    preset: str | None,
    api_key: str | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Check a pending video job once and print its status (and URL when ready)."""
    _configure(quiet, verbose_count)

    def do_status() -> None:
        settings = _load_settings(debug_api)
        config = resolve_provider(Capability.VIDEO, settings, provider_name, preset, api_key)
        client = GenerationClient(settings, cancel_check=cancel_check)
        outcome = _call(
            "Checking video status",
            config,
            quiet,
            lambda: client.check_video_status(config, status_url),
        )
        click.echo(outcome.status)
        if outcome.video_url:
            click.echo(outcome.video_url)

    _run(do_status, quiet)


@cli.command()
@click.option(
    "--capability",
    "-c",
    type=click.Choice([c.label for c in Capability], case_sensitive=False),
    help="Only list presets of this capability.",
)
def presets(capability: str | None) -> None:
    """List built-in provider presets (id, capability, name, endpoint)."""
    for preset_id, config in get_registry().all_presets():
        if capability is not None and config.capability.label != capability.lower():
            continue
        click.echo(f"{preset_id}\t{config.capability.label}\t{config.name}\t{config.endpoint}")


def main() -> None:
    """Entry point for the genbridge console script."""
    cli()


__all__ = ["cli", "main", "chat", "caption", "image", "video", "status", "presets"]
