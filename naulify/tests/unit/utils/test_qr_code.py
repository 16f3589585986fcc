from __future__ import annotations

import pytest
from PIL import Image

from naulify.utils.qr_code import QUIET_ZONE, generate_qr_matrix, render_qr_image, save_qr_png


def test_matrix_has_requested_size_and_light_quiet_zone() -> None:
    matrix = generate_qr_matrix("https://naulify.com/pay/veh-1", 300, 200)

    assert len(matrix) == 200
    assert all(len(row) == 300 for row in matrix)
    assert not any(matrix[0])
    assert not any(row[0] for row in matrix)
    assert any(any(row) for row in matrix)


def test_matrix_never_smaller_than_module_grid() -> None:
    matrix = generate_qr_matrix("x", 1, 1)

    # Version 1 is 21 modules plus the quiet zone on both sides.
    assert len(matrix) == 21 + 2 * QUIET_ZONE
    assert len(matrix[0]) == 21 + 2 * QUIET_ZONE


def test_empty_content_is_rejected() -> None:
    with pytest.raises(ValueError):
        generate_qr_matrix("", 100, 100)
    with pytest.raises(ValueError):
        generate_qr_matrix("x", 0, 100)


def test_render_and_save_png(tmp_path) -> None:
    image = render_qr_image("https://naulify.com/pay/veh-1", size=128)
    assert image.mode == "1"
    assert image.size == (128, 128)
    assert image.getpixel((0, 0)) == 255

    path = save_qr_png("https://naulify.com/pay/veh-1", tmp_path / "out" / "qr.png", size=64)

    assert path.exists()
    with Image.open(path) as loaded:
        assert loaded.size == (64, 64)
