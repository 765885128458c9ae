"""
Source image encoding for provider uploads.

Providers receive source images as base64 JPEG (quality 85), either bare or
wrapped in a data URL depending on the wire schema.
"""

import base64
import io
from pathlib import Path

from PIL import Image

from genbridge.logging_config import get_logger
from genbridge.utils.exceptions import ImageProcessingError

logger = get_logger(__name__)

JPEG_QUALITY = 85


def load_image(image_path: str | Path) -> Image.Image:
    """
    Load an image from file.

    Raises:
        FileNotFoundError: If the file does not exist
        ImageProcessingError: If the file cannot be decoded
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")
    try:
        image = Image.open(path)
        image.load()
        return image
    except Exception as e:
        raise ImageProcessingError(f"Failed to load image: {str(e)}", image_path=str(path)) from e


def convert_to_rgb(image: Image.Image) -> Image.Image:
    """
    Convert an image to RGB mode if it's not already.

    Transparent pixels are composited on a white background.
    """
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA"):
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])  # alpha channel
        return background
    return image.convert("RGB")


def encode_image_base64(image: Image.Image, quality: int = JPEG_QUALITY) -> str:
    """
    Encode a PIL Image as base64 JPEG.

    Raises:
        ImageProcessingError: If encoding fails
    """
    try:
        buffer = io.BytesIO()
        convert_to_rgb(image).save(buffer, format="JPEG", quality=quality)
        return base64.b64encode(buffer.getvalue()).decode("ascii")
    except Exception as e:
        raise ImageProcessingError(f"Failed to encode image: {str(e)}") from e


def encode_image_file(image_path: str | Path) -> str:
    """Load an image file and return it as base64 JPEG ready for upload."""
    image = load_image(image_path)
    w, h = image.size
    logger.debug("Encoding source image path=%s dimensions=%dx%d", image_path, w, h)
    return encode_image_base64(image)


def create_image_data_url(encoded_image: str, mime_type: str = "image/jpeg") -> str:
    """
    Create a data URL from a base64 encoded image.

    Args:
        encoded_image: Base64 encoded image string
        mime_type: MIME type of the image

    Returns:
        Data URL string
    """
    return f"data:{mime_type};base64,{encoded_image}"


def strip_data_url(data: str) -> str:
    """Return the base64 payload of a data URL, or the input unchanged if it is bare base64."""
    data = data.strip()
    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data
