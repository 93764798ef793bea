import numpy as np
import pytest

from glyph_trails.core.surface import CanvasSurface


def test_transform_scope_restores_matrix():
    surface = CanvasSurface(100, 100)
    surface.translate(5.0, 5.0)
    before = surface.matrix

    with surface.transform():
        surface.translate(10.0, 20.0)
        surface.rotate(45.0)
        surface.scale(2.0)
        assert surface.depth == 1
        assert not np.allclose(surface.matrix, before)

    assert surface.depth == 0
    np.testing.assert_array_equal(surface.matrix, before)


def test_transform_scope_restores_after_error():
    surface = CanvasSurface(50, 50)
    with pytest.raises(RuntimeError):
        with surface.transform():
            surface.translate(1.0, 1.0)
            raise RuntimeError("boom")
    assert surface.depth == 0
    np.testing.assert_array_equal(surface.matrix, np.eye(3))


def test_translate_then_rotate_composes_in_local_frame():
    surface = CanvasSurface(100, 100)
    surface.translate(10.0, 20.0)
    surface.rotate(90.0)
    mapped = surface.matrix @ np.array([1.0, 0.0, 1.0])
    np.testing.assert_allclose(mapped[:2], [10.0, 21.0], atol=1e-12)


def test_text_draws_label_centred_on_origin():
    surface = CanvasSurface(120, 80, text_height=18)
    with surface.transform():
        surface.translate(60.0, 40.0)
        surface.fill("#ff0000", 255)
        surface.stroke("#ff0000", 128)
        surface.text("NYU")

    alpha = surface.buffer[..., 3]
    assert alpha.max() > 200
    ys, xs = np.nonzero(alpha)
    assert abs(xs.mean() - 60.0) < 8
    assert abs(ys.mean() - 40.0) < 8
    solid = alpha > 200
    # BGR order: red lives in the last colour channel.
    assert surface.buffer[..., 2][solid].mean() > 200
    assert surface.buffer[..., 0][solid].mean() < 50


def test_alpha_scales_coverage():
    faint = CanvasSurface(120, 80)
    strong = CanvasSurface(120, 80)
    for surface, alpha in ((faint, 40), (strong, 240)):
        surface.translate(60.0, 40.0)
        surface.fill("#000000", alpha)
        surface.text("NYU")
    assert faint.buffer[..., 3].max() < strong.buffer[..., 3].max()


def test_transparent_or_offscreen_text_draws_nothing():
    surface = CanvasSurface(64, 64)
    surface.fill("#123456", 0)
    surface.stroke("#123456", 0)
    surface.translate(32.0, 32.0)
    surface.text("NYU")
    assert surface.buffer.max() == 0

    surface.fill("#123456", 255)
    surface.translate(1000.0, 1000.0)
    surface.text("NYU")
    assert surface.buffer.max() == 0


def test_style_is_scoped():
    surface = CanvasSurface(64, 64)
    with surface.transform():
        surface.fill("#000000", 0)
    surface.translate(32.0, 32.0)
    surface.text("A")
    # Default fill is opaque white.
    assert surface.buffer[..., 3].max() > 200


def test_composite_over_blends_with_background():
    surface = CanvasSurface(4, 4)
    background = np.full((4, 4, 3), 100, dtype=np.uint8)
    np.testing.assert_array_equal(surface.composite_over(background), background)

    surface.buffer[0, 0] = (200, 200, 200, 255)
    surface.buffer[1, 1] = (200, 200, 200, 128)
    out = surface.composite_over(background)
    assert tuple(out[0, 0]) == (200, 200, 200)
    assert 145 <= out[1, 1, 0] <= 155


def test_composite_over_checks_resolution():
    surface = CanvasSurface(4, 4)
    with pytest.raises(ValueError):
        surface.composite_over(np.zeros((5, 4, 3), dtype=np.uint8))


def test_clear_resets_buffer():
    surface = CanvasSurface(40, 40)
    surface.translate(20.0, 20.0)
    surface.text("X")
    surface.clear()
    assert surface.buffer.max() == 0


def test_rejects_empty_canvas():
    with pytest.raises(ValueError):
        CanvasSurface(0, 10)
