import pytest

from clipfx_studio.animation.pop_curve import (
    CurveGenerator,
    PopCurveSpec,
    PopOutMode,
    ScaleBounds,
    ScaleBoundsPolicy,
)
from clipfx_studio.core.config import Config
from clipfx_studio.core.exceptions import ConfigurationError
from clipfx_studio.host.memory import ScalarParameter
from clipfx_studio.timing import ZERO, TimeBase, Timecode


def written(parameter, time_base):
    return [(time_base.to_frames(kf.time), kf.value) for kf in parameter.keyframes]


@pytest.fixture
def generator(time_base):
    return CurveGenerator(time_base)


def test_two_second_clip_at_30fps(generator, time_base):
    scale = ScalarParameter("Scale", 1.0)
    generator.generate(scale, Timecode.from_seconds(2.0), ScaleBounds(0.5, 1.5))

    assert scale.is_animated
    assert written(scale, time_base) == [
        (0, 0.5),
        (4, 1.5),
        (10, 1.0),
        (53, 1.0),
        (57, 1.5),
        (60, 0.5),
    ]


def test_format_keyframes(generator):
    keyframes = generator.plan(60)
    assert generator.format_keyframes(keyframes) == (
        "0: (0.500), 4: (1.500), 10: (1.000), 53: (1.000), 57: (1.500), 60: (0.500)"
    )


def test_format_keyframes_keeps_last_write():
    assert CurveGenerator.format_keyframes([(3, 1.0), (1, 0.5), (3, 2.0)]) == (
        "1: (0.500), 3: (2.000)"
    )


@pytest.mark.parametrize("frames", [0, 5, 21, 32, 60, 600])
def test_pop_in_is_always_written(generator, frames):
    keyframes = generator.plan(frames, ScaleBounds(0.7, 1.3))
    assert keyframes[:3] == [(0, 0.7), (4, 1.3), (10, 1.0)]


def test_zero_length_clip_gets_pop_in_only(generator, time_base):
    scale = ScalarParameter("Scale")
    generator.generate(scale, ZERO)
    assert written(scale, time_base) == [(0, 0.5), (4, 1.5), (10, 1.0)]


@pytest.mark.parametrize(
    "frames,mode",
    [
        (33, PopOutMode.FULL),
        (32, PopOutMode.HALF),
        (22, PopOutMode.HALF),
        (21, PopOutMode.NONE),
        (0, PopOutMode.NONE),
    ],
)
def test_pop_out_threshold(generator, frames, mode):
    assert generator.pop_out_mode(frames) is mode


def test_half_pop_out(generator):
    assert generator.plan(25) == [(0, 0.5), (4, 1.5), (10, 1.0), (22, 1.0), (25, 0.5)]


@pytest.mark.parametrize(
    "flags",
    [
        {"followed_by_text": True},
        {"ends_with_audio": True},
        {"followed_by_text": True, "ends_with_audio": True},
    ],
)
def test_adjacency_suppresses_pop_out(generator, time_base, flags):
    scale = ScalarParameter("Scale")
    generator.generate(scale, Timecode.from_seconds(2.0), **flags)
    assert written(scale, time_base) == [(0, 0.5), (4, 1.5), (10, 1.0)]


def test_generate_replaces_existing_curve(generator, time_base):
    scale = ScalarParameter("Scale")
    scale.is_animated = True
    scale.set_value_at_time(time_base.frame_to_timecode(30), 9.0)

    generator.generate(scale, Timecode.from_seconds(2.0))

    assert 30 not in [frame for frame, _ in written(scale, time_base)]
    assert len(scale.keyframes) == 6


def test_reverse_leaves_static_rest_scale(generator):
    scale = ScalarParameter("Scale")
    generator.generate(scale, Timecode.from_seconds(2.0))

    generator.reverse(scale)

    assert not scale.is_animated
    assert scale.keyframes == []
    assert scale.get_value_at_time(ZERO) == 1.0


def test_custom_spec_offsets():
    spec = PopCurveSpec(pop_in_frames_a=2, pop_in_frames_b=3, pop_out_frames_a=2, pop_out_frames_b=2)
    generator = CurveGenerator(TimeBase(25.0), spec)
    assert generator.plan(50) == [(0, 0.5), (2, 1.5), (5, 1.0), (46, 1.0), (48, 1.5), (50, 0.5)]


def test_negative_offsets_are_rejected():
    with pytest.raises(ConfigurationError):
        PopCurveSpec(pop_out_frames_b=-1)


def test_spec_from_config():
    config = Config(None)
    config.set("PopCurve", "pop_in_frames_a", 2)
    config.set("PopCurve", "max_scale", 1.25)

    spec = PopCurveSpec.from_config(config)

    assert spec.pop_in_frames_a == 2
    assert spec.pop_in_frames_b == 6
    assert spec.default_bounds == ScaleBounds(0.5, 1.25)


class TestScaleBoundsPolicy:
    def test_full_width_line_gets_margin_bounds(self):
        bounds = ScaleBoundsPolicy().bounds_for(42, ScaleBounds())
        assert bounds.min_scale == pytest.approx(0.96)
        assert bounds.max_scale == pytest.approx(1.04)

    def test_short_line_gets_factor_bounds(self):
        bounds = ScaleBoundsPolicy().bounds_for(4, ScaleBounds())
        assert bounds.min_scale == pytest.approx(0.8)
        assert bounds.max_scale == pytest.approx(1.2)

    def test_bounds_never_flatten_the_curve(self):
        bounds = ScaleBoundsPolicy().bounds_for(84, ScaleBounds())
        assert bounds.min_scale <= 1.0 <= bounds.max_scale

    @pytest.mark.parametrize("longest", [None, 0])
    def test_unknown_width_uses_fallback(self, longest):
        fallback = ScaleBounds(0.4, 1.6)
        assert ScaleBoundsPolicy().bounds_for(longest, fallback) is fallback

    def test_full_width_scale(self):
        policy = ScaleBoundsPolicy()
        assert policy.full_width_scale(21) == pytest.approx(2.0)
        assert policy.full_width_scale(84) == pytest.approx(0.5)
        assert policy.full_width_scale(None) is None
