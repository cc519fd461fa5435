"""
Pydantic Models for ClipFX Studio Project Documents

JSON representation of a host project (tracks, clips, effects, parameters and
their keyframes), used by the CLI and the test-suite to drive the animation
operations without an embedding editor.

Models:
- KeyframeDocument: One (time, value) sample
- ParameterDocument: Named parameter of a given kind, static or animated
- EffectDocument: Effect or generator with its parameters
- ClipDocument: Clip with position, selection and effect chain
- TrackDocument: Track of one media kind
- ProjectDocument: Frame rate and tracks

Features:
- Strict validation (positive frame rate, value shape matches kind,
  unique parameter names, unique keyframe times)
- JSON serialization/deserialization
- Conversion to and from the in-memory host graph

Usage:
    from clipfx_studio.host.document import load_project, save_project

    project = load_project("edit.json")
    ...
    save_project(project, "edit.json")
"""

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from typing_extensions import Self

from ..core.exceptions import DocumentError, wrap_exception
from ..timing import Timecode
from .memory import Clip, Effect, Parameter, Project, Track, make_parameter
from .protocols import ClipKind, ParameterKind, Point2D


def _plain_value(value: Any) -> Any:
    """Host value -> JSON-compatible value."""
    if isinstance(value, Point2D):
        return [value.x, value.y]
    return value


class KeyframeDocument(BaseModel):
    """Single keyframe; time is relative to the clip start."""

    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={"example": {"time_ms": 133.333, "value": [120.0, 80.0]}},
    )

    time_ms: Annotated[
        float, Field(ge=0.0, description="Keyframe time in milliseconds from the clip start")
    ]

    value: Annotated[Any, Field(description="Value matching the parameter kind")]


class ParameterDocument(BaseModel):
    """
    Named effect parameter.

    Validates:
    - Choice parameters declare their options
    - Keyframes only on animated parameters, with unique times
    - Static value and keyframe values fit the parameter kind
    """

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Scale",
                "kind": "scalar",
                "value": 1.0,
                "animated": True,
                "keyframes": [{"time_ms": 0.0, "value": 0.5}],
            }
        },
    )

    name: Annotated[str, Field(min_length=1, max_length=255, description="Case-sensitive name")]

    kind: Annotated[ParameterKind, Field(description="Parameter kind")]

    value: Annotated[Any, Field(default=None, description="Static value")]

    choices: Annotated[
        list[str], Field(default_factory=list, description="Options of a choice parameter")
    ]

    animated: Annotated[bool, Field(default=False, description="Driven by keyframes")]

    keyframes: Annotated[
        list[KeyframeDocument], Field(default_factory=list, description="Keyframes by time")
    ]

    @field_validator("keyframes", mode="after")
    @classmethod
    def validate_unique_times(cls, keyframes: list[KeyframeDocument]) -> list[KeyframeDocument]:
        seen = set()
        for keyframe in keyframes:
            if keyframe.time_ms in seen:
                raise ValueError(f"Duplicate keyframe at {keyframe.time_ms}ms")
            seen.add(keyframe.time_ms)
        return keyframes

    @model_validator(mode="after")
    def validate_shape(self) -> Self:
        if self.kind is ParameterKind.CHOICE and not self.choices:
            raise ValueError(f"Choice parameter '{self.name}' needs at least one option")
        if self.keyframes and not self.animated:
            raise ValueError(f"Parameter '{self.name}' has keyframes but is not animated")
        # Building the host parameter checks every value against the kind
        self.to_parameter()
        return self

    def to_parameter(self) -> Parameter:
        try:
            parameter = make_parameter(self.kind, self.name, self.value, self.choices)
            if self.animated:
                parameter.is_animated = True
                for keyframe in self.keyframes:
                    parameter.set_value_at_time(
                        Timecode.from_milliseconds(keyframe.time_ms), keyframe.value
                    )
        except (TypeError, ValueError, IndexError) as e:
            raise ValueError(f"Invalid value for {self.kind.value} parameter '{self.name}': {e}")
        return parameter

    @classmethod
    def from_parameter(cls, parameter: Parameter) -> "ParameterDocument":
        return cls(
            name=parameter.name,
            kind=parameter.kind,
            value=_plain_value(parameter.value),
            choices=list(getattr(parameter, "choices", ())),
            animated=parameter.is_animated,
            keyframes=[
                KeyframeDocument(time_ms=kf.time.milliseconds, value=_plain_value(kf.value))
                for kf in parameter.keyframes
            ],
        )


class EffectDocument(BaseModel):
    """Effect or generator; parameter names must be unique."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=255, description="Plug-in display name")]

    plugin_uid: Annotated[str, Field(default="", description="Plug-in unique identifier")]

    parameters: Annotated[list[ParameterDocument], Field(default_factory=list)]

    @field_validator("parameters", mode="after")
    @classmethod
    def validate_unique_names(cls, parameters: list[ParameterDocument]) -> list[ParameterDocument]:
        names = [p.name for p in parameters]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate parameter names: {duplicates}")
        return parameters

    def to_effect(self) -> Effect:
        return Effect(self.name, self.plugin_uid, [p.to_parameter() for p in self.parameters])

    @classmethod
    def from_effect(cls, effect: Effect) -> "EffectDocument":
        return cls(
            name=effect.name,
            plugin_uid=effect.plugin_uid,
            parameters=[ParameterDocument.from_parameter(p) for p in effect.parameters.values()],
        )


class ClipDocument(BaseModel):
    """Clip position, selection state and effect chain."""

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {"name": "Caption 1", "start_ms": 0.0, "length_ms": 2000.0}
        },
    )

    name: Annotated[str, Field(default="", max_length=255)]

    start_ms: Annotated[float, Field(ge=0.0, description="Timeline position in milliseconds")]

    length_ms: Annotated[float, Field(ge=0.0, description="Duration in milliseconds")]

    selected: Annotated[bool, Field(default=False)]

    effects: Annotated[list[EffectDocument], Field(default_factory=list)]

    generator: Annotated[EffectDocument | None, Field(default=None)]

    def to_clip(self, kind: ClipKind) -> Clip:
        return Clip(
            name=self.name,
            start=Timecode.from_milliseconds(self.start_ms),
            length=Timecode.from_milliseconds(self.length_ms),
            kind=kind,
            selected=self.selected,
            effects=[e.to_effect() for e in self.effects],
            generator=self.generator.to_effect() if self.generator else None,
        )

    @classmethod
    def from_clip(cls, clip: Clip) -> "ClipDocument":
        return cls(
            name=clip.name,
            start_ms=clip.start.milliseconds,
            length_ms=clip.length.milliseconds,
            selected=clip.selected,
            effects=[EffectDocument.from_effect(e) for e in clip.effects],
            generator=EffectDocument.from_effect(clip.generator) if clip.generator else None,
        )


class TrackDocument(BaseModel):
    """Track of one media kind."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    name: Annotated[str, Field(default="", max_length=255)]

    kind: Annotated[ClipKind, Field(default=ClipKind.VIDEO)]

    clips: Annotated[list[ClipDocument], Field(default_factory=list)]


class ProjectDocument(BaseModel):
    """Complete project: frame rate and tracks in timeline order."""

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Interview",
                "frame_rate": 29.97,
                "tracks": [{"name": "Captions", "kind": "video", "clips": []}],
            }
        },
    )

    name: Annotated[str, Field(default="Untitled", max_length=255)]

    frame_rate: Annotated[
        float, Field(gt=0.0, le=1000.0, description="Project frame rate (frames per second)")
    ]

    tracks: Annotated[list[TrackDocument], Field(default_factory=list)]

    def to_project(self) -> Project:
        project = Project(frame_rate=self.frame_rate, name=self.name)
        for track_doc in self.tracks:
            track = project.add_track(Track(track_doc.name, track_doc.kind))
            for clip_doc in track_doc.clips:
                track.add_clip(clip_doc.to_clip(track_doc.kind))
        return project

    def __repr__(self) -> str:
        clips = sum(len(t.clips) for t in self.tracks)
        return (
            f"ProjectDocument(name={self.name!r}, fps={self.frame_rate}, "
            f"tracks={len(self.tracks)}, clips={clips})"
        )


# Helper functions for conversion and JSON serialization


def project_from_document(document: ProjectDocument) -> Project:
    """Build the in-memory host graph from a validated document."""
    return document.to_project()


def document_from_project(project: Project) -> ProjectDocument:
    """Snapshot the in-memory host graph into a document."""
    return ProjectDocument(
        name=project.name,
        frame_rate=project.frame_rate,
        tracks=[
            TrackDocument(
                name=track.name,
                kind=track.kind,
                clips=[ClipDocument.from_clip(c) for c in track.clips],
            )
            for track in project.tracks
        ],
    )


def export_document_to_json(document: ProjectDocument, pretty: bool = True) -> str:
    """
    Export a project document to a JSON string.

    Args:
        document: ProjectDocument to export
        pretty: Enable pretty-printing with indentation

    Returns:
        JSON string representation
    """
    return document.model_dump_json(exclude_none=True, indent=2 if pretty else None)


def import_document_from_json(json_str: str) -> ProjectDocument:
    """
    Import a project document from a JSON string.

    Raises:
        DocumentError: If the JSON is invalid or violates constraints
    """
    try:
        return ProjectDocument.model_validate_json(json_str)
    except ValidationError as e:
        raise wrap_exception(e, DocumentError) from e


def load_project(path: str | Path) -> Project:
    """
    Load a project document file into the in-memory host.

    Raises:
        DocumentError: If the file cannot be read or fails validation
    """
    path = Path(path)
    try:
        json_str = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(
            f"Cannot read project document '{path}'", details={"error": str(e)}
        ) from e
    return project_from_document(import_document_from_json(json_str))


def save_project(project: Project, path: str | Path, pretty: bool = True) -> Path:
    """Write the in-memory host graph to a project document file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_document_to_json(document_from_project(project), pretty), "utf-8")
    return path
