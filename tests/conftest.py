import sys
from pathlib import Path

import pytest

# Add src to the Python path so that clipfx_studio can be imported in tests
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from clipfx_studio.core import constants  # noqa: E402
from clipfx_studio.host.memory import (  # noqa: E402
    ChoiceParameter,
    Clip,
    Effect,
    Project,
    ScalarParameter,
    StringParameter,
    Track,
    Vector2Parameter,
)
from clipfx_studio.host.protocols import ClipKind  # noqa: E402
from clipfx_studio.timing import TimeBase, Timecode  # noqa: E402

FPS = 30.0
SOURCE_CORNERS = [source for source, _ in constants.CORNER_MAP]
PIP_CORNERS = [destination for _, destination in constants.CORNER_MAP]
PIP_MODES = ["Lock Aspect Ratio", "Unlocked", "Free Form"]

# Pixel positions of a tracked 200x100 surface
TRACKED_PIXELS = {
    "surfaceTopLeft": (50.0, 20.0),
    "surfaceTopRight": (200.0, 100.0),
    "surfaceBottomLeft": (50.0, 80.0),
    "surfaceBottomRight": (150.0, 80.0),
}


def frames_to_timecode(frames: int, fps: float = FPS) -> Timecode:
    return Timecode(frames * 1000.0 / fps)


@pytest.fixture
def time_base():
    return TimeBase(FPS)


@pytest.fixture
def make_pip():
    """Factory for Picture-in-Picture effects with scale, location and corner pins."""

    def factory(corners: bool = True, name: str = "Picture in Picture", location=(0.5, 0.5)):
        parameters = [
            ScalarParameter("Scale", 1.0),
            Vector2Parameter("Location", location),
        ]
        if corners:
            parameters += [Vector2Parameter(corner, (0.0, 0.0)) for corner in PIP_CORNERS]
            parameters.append(ChoiceParameter("KeepProportions", PIP_MODES))
        return Effect(name, constants.PIP_UIDS[0], parameters)

    return factory


@pytest.fixture
def make_caption(make_pip):
    """Factory for caption clips (text generator + PiP) positioned in frames."""

    def factory(
        name: str,
        start_frame: int,
        length_frames: int,
        text: str = "Hello world",
        selected: bool = True,
        effects: list | None = None,
    ) -> Clip:
        generator = Effect(
            "Titles & Text",
            "{Svfx:com.vegascreativesoftware:titlesandtext}",
            [StringParameter("Text", text)],
        )
        return Clip(
            name=name,
            start=frames_to_timecode(start_frame),
            length=frames_to_timecode(length_frames),
            kind=ClipKind.VIDEO,
            selected=selected,
            effects=[make_pip()] if effects is None else effects,
            generator=generator,
        )

    return factory


@pytest.fixture
def make_tracking():
    """
    Factory for tracking-source effects.

    `keys` maps corner name -> [(local frame, (x, y)), ...]; by default every
    corner holds TRACKED_PIXELS at each of `frames`.
    """

    def factory(frames=(0, 10, 20), keys: dict | None = None, omit=()) -> Effect:
        if keys is None:
            keys = {corner: [(f, TRACKED_PIXELS[corner]) for f in frames] for corner in SOURCE_CORNERS}
        effect = Effect("Mocha Pro", "com.borisfx.mocha.pro")
        for corner in SOURCE_CORNERS:
            if corner in omit:
                continue
            parameter = Vector2Parameter(corner, (0.0, 0.0))
            parameter.is_animated = True
            for frame, value in keys.get(corner, []):
                parameter.set_value_at_time(frames_to_timecode(frame), value)
            effect.add_parameter(parameter)
        return effect

    return factory


@pytest.fixture
def caption_project(make_caption, make_pip):
    """
    Captions on two video tracks plus one audio track.

    - "First" (0-60) is directly followed by "Second" on another track
    - "Second" (60-120) has nothing adjacent
    - "Third" (150-210) ends together with the audio clip
    - "Bare" (300-330) has no PiP effect
    - "Plate" is a regular video clip with PiP, not a caption
    """
    project = Project(frame_rate=FPS, name="Captions")
    upper = project.add_track(Track("Captions A"))
    lower = project.add_track(Track("Captions B"))
    video = project.add_track(Track("Video"))
    audio = project.add_track(Track("Music", ClipKind.AUDIO))

    upper.add_clip(make_caption("First", 0, 60, text="Short"))
    lower.add_clip(make_caption("Second", 60, 60, text="A somewhat longer caption line"))
    upper.add_clip(make_caption("Third", 150, 60, text="Line one\r\nLine two"))
    lower.add_clip(make_caption("Bare", 300, 30, effects=[]))
    video.add_clip(
        Clip("Plate", frames_to_timecode(0), frames_to_timecode(400), effects=[make_pip()])
    )
    audio.add_clip(
        Clip("Song", frames_to_timecode(120), frames_to_timecode(90), kind=ClipKind.AUDIO)
    )
    return project


@pytest.fixture
def tracking_project(make_pip, make_tracking):
    """Tracked plate (0-90) and a selected PiP overlay (30-90) on top of it."""
    project = Project(frame_rate=FPS, name="Tracking")
    overlay = project.add_track(Track("Overlay"))
    plate = project.add_track(Track("Plate"))

    overlay.add_clip(
        Clip(
            "Screen",
            frames_to_timecode(30),
            frames_to_timecode(60),
            selected=True,
            effects=[make_pip()],
        )
    )
    plate.add_clip(
        Clip(
            "Shot",
            frames_to_timecode(0),
            frames_to_timecode(90),
            selected=True,
            effects=[make_tracking(frames=(0, 29, 30, 45, 90, 91))],
        )
    )
    return project
