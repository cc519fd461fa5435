import pytest

from clipfx_studio.host.memory import (
    BooleanParameter,
    ChoiceParameter,
    Clip,
    Effect,
    Project,
    ScalarParameter,
    StringParameter,
    Track,
    Vector2Parameter,
    make_parameter,
)
from clipfx_studio.host.protocols import (
    AnimatedParameter,
    ChoiceParameterLike,
    ClipKind,
    ClipLike,
    EffectLike,
    ParameterKind,
    Point2D,
)
from clipfx_studio.timing import ZERO, ClipWindow, TimeBase, Timecode


def t(ms):
    return Timecode(float(ms))


class TestParameter:
    def test_static_value(self):
        scale = ScalarParameter("Scale", 2)
        assert scale.value == 2.0
        assert scale.get_value_at_time(t(500)) == 2.0
        scale.set_value_at_time(t(500), 3.0)
        assert scale.value == 3.0
        assert scale.keyframes == []

    def test_enabling_animation_starts_empty_curve(self):
        scale = ScalarParameter("Scale", 1.0)
        scale.is_animated = True
        assert scale.keyframes == []
        assert scale.get_value_at_time(ZERO) == 1.0

    def test_keyframes_sorted_and_last_write_wins(self):
        scale = ScalarParameter("Scale")
        scale.is_animated = True
        scale.set_value_at_time(t(200), 2.0)
        scale.set_value_at_time(t(0), 0.5)
        scale.set_value_at_time(t(200), 3.0)
        assert [(kf.time, kf.value) for kf in scale.keyframes] == [(t(0), 0.5), (t(200), 3.0)]

    def test_disabling_animation_keeps_value_at_zero(self):
        scale = ScalarParameter("Scale", 1.0)
        scale.is_animated = True
        scale.set_value_at_time(ZERO, 0.5)
        scale.set_value_at_time(t(1000), 1.5)
        scale.is_animated = False
        assert scale.keyframes == []
        assert scale.value == 0.5

    def test_scalar_interpolation(self):
        scale = ScalarParameter("Scale")
        scale.is_animated = True
        scale.set_value_at_time(ZERO, 0.0)
        scale.set_value_at_time(t(1000), 2.0)
        assert scale.get_value_at_time(t(250)) == pytest.approx(0.5)
        assert scale.get_value_at_time(t(5000)) == 2.0

    def test_vector_interpolation(self):
        corner = Vector2Parameter("CornerTL")
        corner.is_animated = True
        corner.set_value_at_time(ZERO, (0, 0))
        corner.set_value_at_time(t(100), Point2D(1.0, 4.0))
        value = corner.get_value_at_time(t(50))
        assert (value.x, value.y) == pytest.approx((0.5, 2.0))

    def test_hold_kinds_use_previous_keyframe(self):
        flag = BooleanParameter("Enabled")
        flag.is_animated = True
        flag.set_value_at_time(ZERO, True)
        flag.set_value_at_time(t(100), False)
        assert flag.get_value_at_time(t(99)) is True
        assert flag.get_value_at_time(t(100)) is False

    def test_choice_accepts_labels_and_indices(self):
        mode = ChoiceParameter("KeepProportions", ["Lock", "Unlock", "Free Form"])
        assert mode.value == "Lock"
        mode.set_value_at_time(ZERO, 2)
        assert mode.value == "Free Form"
        with pytest.raises(ValueError):
            mode.set_value_at_time(ZERO, "Stretch")

    def test_choice_needs_options(self):
        with pytest.raises(ValueError):
            ChoiceParameter("Mode", [])

    def test_vector_rejects_scalars(self):
        with pytest.raises(TypeError):
            Vector2Parameter("Location", 1.0)

    @pytest.mark.parametrize("kind", list(ParameterKind))
    def test_make_parameter_covers_every_kind(self, kind):
        parameter = make_parameter(kind, "p", choices=["a", "b"])
        assert parameter.kind is kind
        assert isinstance(parameter, AnimatedParameter)

    def test_protocol_conformance(self):
        assert isinstance(ChoiceParameter("Mode", ["a"]), ChoiceParameterLike)
        assert isinstance(Effect("FX"), EffectLike)
        assert isinstance(Clip("c", ZERO, ZERO), ClipLike)


class TestEffect:
    def test_find_parameter_by_name_and_kind(self):
        effect = Effect("PiP", parameters=[ScalarParameter("Scale"), StringParameter("Name")])
        assert effect.find_parameter("Scale").name == "Scale"
        assert effect.find_parameter("Scale", ParameterKind.SCALAR) is not None
        assert effect.find_parameter("Scale", ParameterKind.VECTOR2) is None
        assert effect.find_parameter("scale") is None

    def test_duplicate_names_rejected(self):
        effect = Effect("PiP", parameters=[ScalarParameter("Scale")])
        with pytest.raises(ValueError):
            effect.add_parameter(ScalarParameter("Scale"))


class TestProject:
    def test_clips_kept_in_start_order(self):
        track = Track("V1")
        track.add_clip(Clip("b", t(2000), t(100)))
        track.add_clip(Clip("a", t(0), t(100)))
        track.add_clip(Clip("c", t(2000), t(50)))
        assert [c.name for c in track.clips] == ["a", "b", "c"]

    def test_clip_kind_must_match_track(self):
        with pytest.raises(ValueError):
            Track("A1", ClipKind.AUDIO).add_clip(Clip("video", ZERO, t(100)))

    def test_iter_clips_filters(self):
        project = Project(30.0)
        video = project.add_track(Track("V1"))
        audio = project.add_track(Track("A1", ClipKind.AUDIO))
        video.add_clip(Clip("v1", ZERO, t(100), selected=True))
        video.add_clip(Clip("v2", t(100), t(100)))
        audio.add_clip(Clip("a1", ZERO, t(100), kind=ClipKind.AUDIO, selected=True))

        assert [c.name for _, c in project.iter_clips()] == ["v1", "v2", "a1"]
        assert [c.name for _, c in project.iter_clips(ClipKind.VIDEO)] == ["v1", "v2"]
        assert [c.name for _, c in project.iter_clips(selected_only=True)] == ["v1", "a1"]

    def test_clip_window(self):
        clip = Clip("c", t(1000), t(2000))
        assert clip.end == t(3000)
        assert clip.window(TimeBase(30.0)) == ClipWindow(30, 90)
