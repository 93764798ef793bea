import math

import numpy as np
import pytest

from glyph_trails.config import OverlayConfig
from glyph_trails.core.arclength import path_length
from glyph_trails.core.curve import interpolate_control_polygon
from glyph_trails.core.text_path import PathState, TextPath, opacity_at

ELBOW_CONTROL = [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0)]


def _elbow_path(settings, rng, **kwargs):
    return TextPath(interpolate_control_polygon(ELBOW_CONTROL), settings, rng, **kwargs)


def test_new_path_starts_pending_and_transparent(bounds, settings, rng):
    path = TextPath.spawn(bounds, settings, rng)

    assert path.age == 0
    assert path.opacity == 0.0
    assert path.glyphs == []
    assert path.state is PathState.PENDING
    assert 150.0 <= path.peak_opacity <= 255.0
    assert isinstance(path.lifespan, int)
    assert 180 <= path.lifespan <= 300
    assert not path.is_expired()


def test_glyph_count_follows_spacing(settings, rng):
    path = _elbow_path(settings, rng)
    path.update()

    total = path_length(path.points)
    assert path.state is PathState.ACTIVE
    assert len(path.glyphs) == math.floor(total / (18 * 1.5))
    assert path.total_length == pytest.approx(total)


def test_glyphs_lie_within_curve_bounding_box(settings, rng):
    path = _elbow_path(settings, rng)
    path.update()

    low = path.points.min(axis=0) - 1e-9
    high = path.points.max(axis=0) + 1e-9
    for glyph in path.glyphs:
        assert low[0] <= glyph.position[0] <= high[0]
        assert low[1] <= glyph.position[1] <= high[1]


def test_first_glyph_sits_on_path_start(settings, rng):
    path = _elbow_path(settings, rng)
    path.update()
    assert path.glyphs[0].position == (0.0, 0.0)


def test_glyph_randomness_within_configured_ranges(settings, rng):
    path = _elbow_path(settings, rng)
    path.update()
    for glyph in path.glyphs:
        assert -3.0 <= glyph.jitter_offset <= 3.0
        assert 0.0 <= glyph.phase <= 2 * math.pi


def test_glyphs_are_laid_out_only_once(settings, rng):
    path = _elbow_path(settings, rng)
    path.update()
    first_layout = list(path.glyphs)
    for _ in range(10):
        path.update()
    assert path.glyphs == first_layout


def test_layout_follows_state_not_age(settings, rng):
    path = _elbow_path(settings, rng)
    path.age = 5
    path.update()
    assert path.glyphs
    assert path.state is PathState.ACTIVE


def test_degenerate_path_has_no_glyphs(settings, rng, surface):
    path = TextPath(np.zeros((21, 2)), settings, rng)
    path.update()
    path.render(surface)

    assert path.glyphs == []
    assert surface.calls == []


def test_opacity_envelope_shape():
    peak, lifespan = 200.0, 250
    values = [opacity_at(age, peak, lifespan) for age in range(lifespan + 1)]

    fade_in = values[: 31]
    assert all(b >= a for a, b in zip(fade_in, fade_in[1:]))
    assert values[0] == 0.0
    assert values[30] == peak
    assert all(v == peak for v in values[30 : lifespan - 60 + 1])
    fade_out = values[lifespan - 60 :]
    assert all(b <= a for a, b in zip(fade_out, fade_out[1:]))
    assert values[lifespan] == pytest.approx(0.0, abs=1e-9)


def test_overlapping_windows_prefer_fade_out():
    # Lifespan 60: every age is inside the fade-out window.
    assert opacity_at(10, 200.0, 60) == pytest.approx(200.0 * (1 - 10 / 60))
    assert opacity_at(60, 200.0, 60) == pytest.approx(0.0, abs=1e-9)


def test_opacity_is_clamped_after_lifespan():
    assert opacity_at(500, 200.0, 250) == 0.0


def test_expiry_happens_exactly_at_lifespan(settings, rng):
    path = _elbow_path(settings, rng, peak_opacity=180.0, lifespan=200)
    for age in range(1, 200):
        path.update()
        assert path.age == age
        assert 0.0 <= path.opacity <= path.peak_opacity
        assert not path.is_expired(), f"expired early at age {age}"
    path.update()
    assert path.age == 200
    assert path.is_expired()


def test_render_scopes_each_glyph(settings, rng, surface):
    path = _elbow_path(settings, rng, peak_opacity=200.0, lifespan=200)
    for _ in range(40):
        path.update()
    path.render(surface)

    glyph_count = len(path.glyphs)
    assert glyph_count > 0
    assert len(surface.named("push")) == glyph_count
    assert len(surface.named("pop")) == glyph_count
    assert surface.max_depth == 1
    assert surface.depth == 0
    assert surface.named("text") == [("text", "NYU")] * glyph_count


def test_render_applies_wobble_rotation_and_alpha(settings, rng, surface):
    path = _elbow_path(settings, rng, peak_opacity=200.0, lifespan=200)
    for _ in range(40):
        path.update()
    path.render(surface)

    glyph = path.glyphs[0]
    first = surface.calls[: surface.calls.index(("pop",)) + 1]
    names = [call[0] for call in first]
    assert names == ["push", "translate", "rotate", "scale", "fill", "stroke", "stroke_weight", "text", "pop"]

    wave = math.sin(math.radians(40 * 3 + glyph.phase)) * 2
    pulse = 1 + math.sin(math.radians(40 * 2 + glyph.phase)) * 0.1
    assert first[1] == ("translate", glyph.position[0], pytest.approx(glyph.position[1] + wave))
    assert first[2][1] == pytest.approx(glyph.tangent_angle + glyph.jitter_offset * 0.1)
    assert first[3][1] == pytest.approx(pulse)
    assert first[4] == ("fill", "#8B5FBF", 200.0)
    assert first[5] == ("stroke", "#8B5FBF", 100.0)
    assert first[6] == ("stroke_weight", 0.5)


def test_custom_label_is_drawn(rng, surface):
    settings = OverlayConfig(label="HELLO")
    path = _elbow_path(settings, rng)
    path.update()
    path.render(surface)
    assert {call for call in surface.named("text")} == {("text", "HELLO")}
