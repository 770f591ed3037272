"""Parameter selection and payload handling for Real-CUGAN upscaling."""

from __future__ import annotations

import base64
import json

REPO = "shichen1231/Real-CUGAN"
_MAX_PIXELS = 400000
_JPEG_PREFIX = "data:image/jpeg;base64,"
_PNG_PREFIX = "data:image/png;base64,"


def choose_scale(spell: str, width: int, height: int) -> int:
    """Pick the upscale factor from the spell text and image size."""
    small = width * height < _MAX_PIXELS
    if "双重吟唱" in spell:
        return 2
    if "三重吟唱" in spell and small:
        return 3
    if "四重吟唱" in spell and small:
        return 4
    return 2


def choose_model(spell: str, scale: int) -> str:
    """Pick the denoise variant from the spell text."""
    if "强力术式" in spell:
        return "denoise3x"
    if "中等术式" in spell:
        return "denoise2x" if scale == 2 else "no-denoise"
    if "弱术式" in spell:
        return "denoise1x" if scale == 2 else "no-denoise"
    if "不变式" in spell:
        return "no-denoise"
    return "conservative"


def model_name(spell: str, width: int, height: int) -> str:
    """Return the model file name for a spell and image size."""
    scale = choose_scale(spell, width, height)
    return f"up{scale}x-latest-{choose_model(spell, scale)}.pth"


def build_request(image_bytes: bytes, modelname: str) -> bytes:
    """Encode the prediction request body as JSON."""
    encoded = _JPEG_PREFIX + base64.b64encode(image_bytes).decode("ascii")
    return json.dumps({"data": [encoded, modelname, 2]}).encode("utf-8")


def extract_image(response: bytes | str) -> str:
    """Return the base64 PNG data from a prediction response, or '' if absent."""
    doc = json.loads(response)
    try:
        value = doc["data"][0]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(value, str):
        return ""
    return value.removeprefix(_PNG_PREFIX)