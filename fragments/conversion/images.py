"""Image transcoding with Pillow at fixed encoder settings."""

import io

from PIL import Image, ImageSequence, UnidentifiedImageError

from common.constants import AVIF_QUALITY, JPEG_QUALITY, PNG_COMPRESS_LEVEL, WEBP_QUALITY
from common.logging_config import get_logger
from fragments.content_types import MediaType
from fragments.exceptions import ConversionError, UnsupportedConversionError

logger = get_logger(__name__)

# Pillow format name and save() options per output type
ENCODERS = {
    MediaType.IMAGE_PNG: ("PNG", {"optimize": True, "compress_level": PNG_COMPRESS_LEVEL}),
    MediaType.IMAGE_JPEG: ("JPEG", {"quality": JPEG_QUALITY, "progressive": True}),
    MediaType.IMAGE_WEBP: ("WEBP", {"quality": WEBP_QUALITY, "lossless": False}),
    MediaType.IMAGE_GIF: ("GIF", {}),
    MediaType.IMAGE_AVIF: ("AVIF", {"quality": AVIF_QUALITY}),
}

ANIMATED_OUTPUTS = frozenset({MediaType.IMAGE_GIF, MediaType.IMAGE_WEBP})


def _prepare_frame(frame: Image.Image, target: MediaType) -> Image.Image:
    if target is MediaType.IMAGE_JPEG and frame.mode not in ("RGB", "L"):
        if frame.mode in ("RGBA", "LA", "P", "PA"):
            rgba = frame.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background
        return frame.convert("RGB")
    if target is MediaType.IMAGE_GIF and frame.mode not in ("P", "L"):
        return frame.convert("RGBA" if "A" in frame.getbands() else "RGB")
    if target is MediaType.IMAGE_PNG and frame.mode == "CMYK":
        return frame.convert("RGB")
    if target in (MediaType.IMAGE_WEBP, MediaType.IMAGE_AVIF) and frame.mode not in ("RGB", "RGBA"):
        return frame.convert("RGBA" if frame.has_transparency_data else "RGB")
    return frame


def convert_image(data: bytes, target: MediaType) -> bytes:
    """
    Decode an image and re-encode it in the target format.

    Animated input keeps its frames only for GIF and WebP output; every
    other format gets the first frame.

    Args:
        data: Encoded source image
        target: Output image type

    Returns:
        Encoded image bytes

    Raises:
        ConversionError: If the source bytes are not a decodable image or
            exceed the decompression bomb pixel limit
        UnsupportedConversionError: If target is not an image type
    """
    if target not in ENCODERS:
        raise UnsupportedConversionError(f"Unsupported image conversion to {target.value}")

    fmt, options = ENCODERS[target]

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.warning(f"Unable to decode image for conversion to {target.value}: {e}")
        raise ConversionError("unable to decode image data") from e

    output = io.BytesIO()
    frame_count = getattr(image, "n_frames", 1)

    if frame_count > 1 and target in ANIMATED_OUTPUTS:
        frames = [_prepare_frame(frame.copy(), target) for frame in ImageSequence.Iterator(image)]
        frames[0].save(
            output,
            format=fmt,
            save_all=True,
            append_images=frames[1:],
            loop=image.info.get("loop", 0),
            duration=image.info.get("duration", 100),
            **options,
        )
    else:
        image.seek(0)
        _prepare_frame(image, target).save(output, format=fmt, **options)

    logger.debug(f"Converted image to {target.value} ({frame_count} source frames, {output.tell()} bytes)")
    return output.getvalue()
