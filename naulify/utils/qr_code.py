"""Payment QR code rendering.

``generate_qr_matrix`` returns the code as rows of booleans (``True`` is a
dark module) scaled to the requested pixel size; ``render_qr_image`` turns
that into a 1-bit Pillow image for saving or display.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import qrcode
from PIL import Image

QUIET_ZONE = 4

Matrix = List[List[bool]]


def _module_matrix(content: str) -> Matrix:
    if not content:
        raise ValueError("QR content must not be empty")
    code = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        border=QUIET_ZONE,
    )
    code.add_data(content)
    code.make(fit=True)
    return [list(row) for row in code.get_matrix()]


def generate_qr_matrix(content: str, width: int, height: int) -> Matrix:
    """Encode ``content`` and scale it to ``width`` x ``height`` pixels.

    The size never drops below one pixel per module, so a request smaller than
    the code itself returns the unscaled module matrix dimensions.
    """
    if width <= 0 or height <= 0:
        raise ValueError("QR size must be positive")
    modules = _module_matrix(content)
    rows = len(modules)
    cols = len(modules[0])
    out_w = max(width, cols)
    out_h = max(height, rows)
    return [
        [modules[y * rows // out_h][x * cols // out_w] for x in range(out_w)]
        for y in range(out_h)
    ]


def render_qr_image(content: str, size: int = 512) -> Image.Image:
    matrix = generate_qr_matrix(content, size, size)
    image = Image.new("1", (len(matrix[0]), len(matrix)), 1)
    image.putdata([0 if dark else 255 for row in matrix for dark in row])
    return image


def save_qr_png(content: str, path: Union[str, Path], size: int = 512) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    render_qr_image(content, size).save(target, "PNG")
    return target


__all__ = ["QUIET_ZONE", "generate_qr_matrix", "render_qr_image", "save_qr_png"]
