"""
Host-Modul für ClipFX Studio

Komponenten:
- Protocols: AnimatedParameter, EffectLike, ClipLike, ClipClassifier
- Reference host: Project, Track, Clip, Effect and parameter classes
- NameClassifier: plug-in name/UID based classification
- Pydantic documents: load_project, save_project
- Inspection: describe_effect parameter dump
"""

from .classifier import NameClassifier
from .document import (
    ClipDocument,
    EffectDocument,
    KeyframeDocument,
    ParameterDocument,
    ProjectDocument,
    TrackDocument,
    document_from_project,
    export_document_to_json,
    import_document_from_json,
    load_project,
    project_from_document,
    save_project,
)
from .inspection import describe_clip, describe_effect
from .memory import (
    BooleanParameter,
    ChoiceParameter,
    Clip,
    Effect,
    Parameter,
    Project,
    ScalarParameter,
    StringParameter,
    Track,
    Vector2Parameter,
    make_parameter,
)
from .protocols import (
    AnimatedParameter,
    ChoiceParameterLike,
    ClipClassifier,
    ClipKind,
    ClipLike,
    EffectLike,
    Keyframe,
    ParameterKind,
    Point2D,
)

__all__ = [
    # Protocols
    "AnimatedParameter",
    "ChoiceParameterLike",
    "ClipClassifier",
    "ClipKind",
    "ClipLike",
    "EffectLike",
    "Keyframe",
    "ParameterKind",
    "Point2D",
    # Reference host
    "Parameter",
    "ScalarParameter",
    "Vector2Parameter",
    "BooleanParameter",
    "StringParameter",
    "ChoiceParameter",
    "make_parameter",
    "Effect",
    "Clip",
    "Track",
    "Project",
    # Classification
    "NameClassifier",
    # Documents
    "KeyframeDocument",
    "ParameterDocument",
    "EffectDocument",
    "ClipDocument",
    "TrackDocument",
    "ProjectDocument",
    "project_from_document",
    "document_from_project",
    "export_document_to_json",
    "import_document_from_json",
    "load_project",
    "save_project",
    # Inspection
    "describe_effect",
    "describe_clip",
]
