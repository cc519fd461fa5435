import pytest

from clipfx_studio.animation.location import LocationHandle, sync_text_location
from clipfx_studio.core.exceptions import NoTargetError
from clipfx_studio.host.memory import Effect, Project, ScalarParameter, Track
from clipfx_studio.host.protocols import Point2D
from clipfx_studio.timing import ZERO


@pytest.fixture
def location_project(make_caption, make_pip):
    project = Project(frame_rate=30.0)
    upper = project.add_track(Track("Upper"))
    lower = project.add_track(Track("Lower"))

    upper.add_clip(make_caption("Late", 90, 30, effects=[make_pip(location=(0.9, 0.9))]))
    lower.add_clip(make_caption("Early", 30, 30, effects=[make_pip(location=(0.2, 0.8))]))
    upper.add_clip(make_caption("Unselected", 0, 30, selected=False))
    return project


def locations(project):
    return {
        clip.name: clip.effects[0].find_parameter("Location").value
        for _, clip in project.iter_clips()
        if clip.effects
    }


def test_earliest_location_copied_to_all_selected(location_project):
    applied = sync_text_location(location_project)

    assert applied == 2
    values = locations(location_project)
    assert values["Late"] == Point2D(0.2, 0.8)
    assert values["Early"] == Point2D(0.2, 0.8)
    assert values["Unselected"] == Point2D(0.5, 0.5)


def test_animated_location_becomes_static(location_project):
    late = location_project.tracks[0].clips[-1]
    location = late.effects[0].find_parameter("Location")
    location.is_animated = True
    location.set_value_at_time(ZERO, (0.0, 0.0))

    sync_text_location(location_project)

    assert not location.is_animated
    assert location.value == Point2D(0.2, 0.8)


def test_axis_pair_fallback(make_caption):
    project = Project(frame_rate=30.0)
    track = project.add_track(Track("Captions"))
    first = Effect(
        "Picture in Picture",
        parameters=[ScalarParameter("Position X", 0.1), ScalarParameter("Center Y", 0.7)],
    )
    second = Effect(
        "Picture in Picture",
        parameters=[ScalarParameter("Location X", 0.5), ScalarParameter("Location Y", 0.5)],
    )
    track.add_clip(make_caption("A", 0, 30, effects=[first]))
    track.add_clip(make_caption("B", 30, 30, effects=[second]))

    assert sync_text_location(project) == 2
    assert second.find_parameter("Location X").value == pytest.approx(0.1)
    assert second.find_parameter("Location Y").value == pytest.approx(0.7)


def test_handle_needs_both_axes(make_caption):
    effect = Effect("Picture in Picture", parameters=[ScalarParameter("Location X", 0.1)])
    clip = make_caption("A", 0, 30, effects=[effect])
    assert LocationHandle.find(clip, effect) is None


def test_ties_resolved_by_track_order(make_caption, make_pip):
    project = Project(frame_rate=30.0)
    project.add_track(Track("Upper")).add_clip(
        make_caption("Upper", 0, 30, effects=[make_pip(location=(0.1, 0.1))])
    )
    project.add_track(Track("Lower")).add_clip(
        make_caption("Lower", 0, 30, effects=[make_pip(location=(0.9, 0.9))])
    )

    sync_text_location(project)

    assert locations(project)["Lower"] == Point2D(0.1, 0.1)


def test_nothing_selected_raises(location_project):
    for _, clip in location_project.iter_clips():
        clip.selected = False
    with pytest.raises(NoTargetError, match="No selected text events"):
        sync_text_location(location_project)
