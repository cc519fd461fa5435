"""
Zentrale Konstanten für ClipFX Studio

Parameter names, plug-in identifiers and curve defaults used across the
animation drivers. Everything here can be overridden through config.ini.
"""

# =============================================================================
# POP CURVE DEFAULTS (Frames)
# =============================================================================

DEFAULT_MIN_SCALE = 0.5
DEFAULT_MAX_SCALE = 1.5

POP_IN_FRAMES_A = 4
POP_IN_FRAMES_B = 6
POP_OUT_FRAMES_A = 4
POP_OUT_FRAMES_B = 3

FULL_POP_OUT_MIN_FRAME_BUFFER = 15
HALF_POP_OUT_MIN_FRAME_BUFFER = 8

# Settled scale between pop-in and pop-out
REST_SCALE = 1.0

# =============================================================================
# TEXT WIDTH
# =============================================================================

# Number of characters that fill the full frame width at Scale = 1
FULL_WIDTH_CHARACTERS = 42.0
SCALE_GROW_FACTOR = 1.2
SCALE_SHRINK_FACTOR = 0.8
SCALE_MARGIN = 0.04

# =============================================================================
# PARAMETER NAMES
# =============================================================================

SCALE_PARAMETER = "Scale"
TEXT_PARAMETER = "Text"
LOCATION_PARAMETER = "Location"
LOCATION_AXIS_FALLBACKS = (
    ("Location X", "Location Y"),
    ("Position X", "Position Y"),
    ("Center X", "Center Y"),
)

# Corner-pin mode selector on the PiP effect; option 2 is "Free Form"
MODE_PARAMETER = "KeepProportions"
FREE_FORM_CHOICE_INDEX = 2

# Tracking source corner -> PiP corner, in processing order
CORNER_MAP = (
    ("surfaceTopLeft", "CornerTL"),
    ("surfaceTopRight", "CornerTR"),
    ("surfaceBottomLeft", "CornerBL"),
    ("surfaceBottomRight", "CornerBR"),
)

# Top right corner sample holds (width, height) in pixels
REFERENCE_CORNER = "surfaceTopRight"

# =============================================================================
# PLUG-IN IDENTIFIERS
# =============================================================================

PIP_UIDS = (
    "{Svfx:com.vegascreativesoftware:pictureinpicture}",
    "{Svfx:com.sonycreativesoftware:pictureinpicture}",
)
PIP_NAMES = ("Picture in Picture",)

TEXT_GENERATOR_UIDS = ("titlesandtext",)
TEXT_GENERATOR_NAMES = ("Titles & Text", "Text")

TRACKING_UIDS = ("mocha",)
TRACKING_NAMES = ("Mocha",)

# =============================================================================
# PRESENTATION
# =============================================================================

PARAMETER_DUMP_LIMIT = 1400
