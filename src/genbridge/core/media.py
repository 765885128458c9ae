"""
Downloading and saving generated media.

Files are named ``AI_GEN_<epoch-ms>.jpg`` (images) or ``AI_VIDEO_<epoch-ms>.mp4``
(videos) and are always created exclusively: an existing file is never
overwritten, the millisecond stamp is advanced instead.
"""

from __future__ import annotations

import base64
import binascii
import time
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import BinaryIO

import requests

from genbridge.core.config import Settings, get_settings
from genbridge.core.images import strip_data_url
from genbridge.core.outcomes import ImageKind, ImageOutcome
from genbridge.logging_config import get_logger
from genbridge.utils.exceptions import (
    GenbridgeError,
    HttpStatusError,
    ParseError,
    RequestTimeoutError,
    StorageError,
    TransportError,
    ValidationError,
)
from genbridge.utils.result import Err, Ok, Result, err_from

logger = get_logger(__name__)

_CHUNK_SIZE = 64 * 1024


class MediaKind(Enum):
    IMAGE = ("AI_GEN_", ".jpg")
    VIDEO = ("AI_VIDEO_", ".mp4")

    @property
    def prefix(self) -> str:
        return self.value[0]

    @property
    def suffix(self) -> str:
        return self.value[1]


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class MediaFetcher:
    """Saves image/video outcomes into a destination directory."""

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """
        Args:
            settings: Timeouts and default output directory; defaults to the global settings
            clock: Millisecond timestamp source used in file names (injectable for tests)
        """
        self.settings = settings or get_settings()
        self.clock = clock or _epoch_ms

    def _destination(self, destination_dir: str | Path | None) -> Path:
        dest = Path(destination_dir) if destination_dir is not None else self.settings.output_dir
        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create output directory: {e}", path=str(dest)) from e
        return dest

    def _create_exclusive(self, dest: Path, kind: MediaKind) -> tuple[Path, BinaryIO]:
        stamp = self.clock()
        while True:
            path = dest / f"{kind.prefix}{stamp}{kind.suffix}"
            try:
                return path, open(path, "xb")
            except FileExistsError:
                stamp += 1
            except OSError as e:
                raise StorageError(f"Cannot create file: {e}", path=str(path)) from e

    def fetch(
        self,
        url: str,
        destination_dir: str | Path | None = None,
        kind: MediaKind = MediaKind.IMAGE,
    ) -> Result[Path]:
        """
        Download a URL into a new timestamped file.

        Returns:
            Ok(path) on success. Err on transport failure or a non-2xx status
            (no file is created), or when the stream breaks (the partial file
            is removed).
        """
        if not url:
            return err_from(ValidationError("Download URL cannot be empty", field="url"))
        timeout = self.settings.timeout_for(None)
        try:
            dest = self._destination(destination_dir)
            logger.debug("Downloading %s url=%s", kind.name.lower(), url)
            try:
                response = requests.get(url, stream=True, timeout=timeout)
            except requests.exceptions.Timeout as e:
                raise RequestTimeoutError(f"Download timed out: {url}", original_error=e) from e
            except requests.exceptions.RequestException as e:
                raise TransportError(f"Download failed: {str(e)}", original_error=e) from e
            try:
                if not 200 <= response.status_code < 300:
                    raise HttpStatusError(
                        f"Download failed with status {response.status_code}: {url}",
                        status_code=response.status_code,
                    )
                path = self._stream_to_file(response, dest, kind)
            finally:
                response.close()
        except GenbridgeError as e:
            logger.info("Download failed: %s", e)
            return err_from(e)
        logger.info("Saved %s to %s", kind.name.lower(), path)
        return Ok(path)

    def _stream_to_file(self, response: requests.Response, dest: Path, kind: MediaKind) -> Path:
        path, fh = self._create_exclusive(dest, kind)
        written = 0
        try:
            with fh:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
                        written += len(chunk)
        except requests.exceptions.RequestException as e:
            path.unlink(missing_ok=True)
            raise TransportError(f"Download interrupted: {str(e)}", original_error=e) from e
        except OSError as e:
            path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path.name}: {e}", path=str(path)) from e
        logger.debug("Wrote %d bytes to %s", written, path)
        return path

    def save_base64(self, data: str, destination_dir: str | Path | None = None) -> Result[Path]:
        """Decode base64 image data (data URL prefix allowed) into a new AI_GEN_<ms>.jpg file."""
        try:
            try:
                image_bytes = base64.b64decode(strip_data_url(data), validate=True)
            except (binascii.Error, ValueError) as e:
                raise ParseError(f"Image data is not valid base64: {str(e)}") from e
            if not image_bytes:
                raise ParseError("Image data is empty")
            dest = self._destination(destination_dir)
            path, fh = self._create_exclusive(dest, MediaKind.IMAGE)
            try:
                with fh:
                    fh.write(image_bytes)
            except OSError as e:
                path.unlink(missing_ok=True)
                raise StorageError(f"Failed to write {path.name}: {e}", path=str(path)) from e
        except GenbridgeError as e:
            logger.info("Saving image failed: %s", e)
            return err_from(e)
        logger.info("Saved image to %s (%d bytes)", path, len(image_bytes))
        return Ok(path)

    def save_outcome(
        self, outcome: ImageOutcome, destination_dir: str | Path | None = None
    ) -> Result[Path]:
        """Save an image outcome: URLs are downloaded, base64 is decoded, raw bodies are refused."""
        if outcome.kind is ImageKind.URL:
            return self.fetch(outcome.value, destination_dir, MediaKind.IMAGE)
        if outcome.kind is ImageKind.BASE64:
            return self.save_base64(outcome.value, destination_dir)
        return Err(
            "Provider returned an unrecognized image response; review the raw body before use",
            ParseError("Unrecognized image response", response=outcome.value[:500]),
        )


__all__ = ["MediaFetcher", "MediaKind"]
