"""
Resolution variants for CDN image URLs.

The image CDN encodes its processing instructions as base64 JSON in the
last path segment, e.g.
``{"bucket": "...", "key": "...", "edits": {"resize": {"width": 979, "height": 743}}}``.
Rewriting ``edits.resize`` requests a different size of the same image.
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse, urlunparse

from ..config.constants import (
    DEFAULT_RESIZE_HEIGHT,
    DEFAULT_RESIZE_WIDTH,
    IMAGE_CDN_HOSTS,
    QUALITY_PRESETS,
)

logger = logging.getLogger(__name__)


def _decode_segment(segment: str) -> Optional[Dict[str, Any]]:
    padded = segment + '=' * (-len(segment) % 4)
    if '-' in segment or '_' in segment:
        raw = base64.urlsafe_b64decode(padded)
    else:
        raw = base64.b64decode(padded, validate=True)
    params = json.loads(raw.decode('utf-8'))
    return params if isinstance(params, dict) else None


def _encode_segment(params: Dict[str, Any]) -> str:
    payload = json.dumps(params, separators=(',', ':'), ensure_ascii=False).encode('utf-8')
    encoded = base64.b64encode(payload).decode('ascii')
    # "/" would split the path segment
    if '/' in encoded:
        encoded = base64.urlsafe_b64encode(payload).decode('ascii')
    return encoded


def scale_to_fit(width: int, height: int, max_width: int,
                 max_height: int) -> Tuple[int, int]:
    """
    Target dimensions for a resize directive.

    Smaller images are scaled up preserving aspect ratio until they touch
    the box; images already at or above it are set to the box itself.
    """
    ratio = min(max_width / width, max_height / height)
    if ratio > 1:
        return int(width * ratio + 0.5), int(height * ratio + 0.5)
    return max_width, max_height


def improve_image_quality(image_url: str, max_width: int = 1920,
                          max_height: int = 1080) -> str:
    """
    Rewrite a CDN image URL to request a different resolution.

    Args:
        image_url: Image URL as stored on the listing
        max_width: Target box width
        max_height: Target box height

    Returns:
        The rewritten URL, or ``image_url`` unchanged when it is not a CDN
        URL or carries no decodable resize directive. Never raises.
    """
    if not image_url:
        return image_url

    try:
        parsed = urlparse(image_url)
    except ValueError:
        return image_url
    if parsed.hostname not in IMAGE_CDN_HOSTS:
        return image_url

    head, _, segment = parsed.path.rpartition('/')
    if not segment:
        return image_url

    try:
        params = _decode_segment(segment)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not decode resize directive in {image_url}: {e}")
        return image_url

    edits = params.get('edits') if params else None
    resize = edits.get('resize') if isinstance(edits, dict) else None
    if not isinstance(resize, dict):
        logger.debug(f"No resize directive in {image_url}")
        return image_url

    try:
        width = float(resize.get('width') or DEFAULT_RESIZE_WIDTH)
        height = float(resize.get('height') or DEFAULT_RESIZE_HEIGHT)
        if width <= 0 or height <= 0:
            return image_url
        target = scale_to_fit(width, height, max_width, max_height)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Unusable resize dimensions in {image_url}")
        return image_url

    resize['width'], resize['height'] = target

    new_path = f"{head}/{_encode_segment(params)}"
    return urlunparse(parsed._replace(path=new_path))


def apply_preset(image_url: str, preset: str) -> str:
    """
    Rewrite an image URL to one of the named quality presets.

    Raises:
        ValueError: If the preset name is unknown
    """
    if preset not in QUALITY_PRESETS:
        raise ValueError(
            f"Unknown quality preset {preset!r}; expected one of {', '.join(QUALITY_PRESETS)}")
    width, height = QUALITY_PRESETS[preset]
    return improve_image_quality(image_url, width, height)


def get_high_quality_image(image_url: str) -> str:
    """For sliders and detail views."""
    return apply_preset(image_url, "high")


def get_medium_quality_image(image_url: str) -> str:
    """For cards and lists."""
    return apply_preset(image_url, "medium")


def get_thumbnail_image(image_url: str) -> str:
    return apply_preset(image_url, "thumbnail")
