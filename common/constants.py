"""Project-wide constants (encoder settings, size limits, extension map)."""

MAX_FRAGMENT_SIZE_BYTES: int = 5 * 1024 * 1024  # 5 MiB default request body limit

PNG_COMPRESS_LEVEL: int = 9
JPEG_QUALITY: int = 90
WEBP_QUALITY: int = 90
AVIF_QUALITY: int = 80

EXTENSION_MEDIA_TYPES: dict[str, str] = {
    "txt": "text/plain",
    "md": "text/markdown",
    "html": "text/html",
    "json": "application/json",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "gif": "image/gif",
    "avif": "image/avif",
}
