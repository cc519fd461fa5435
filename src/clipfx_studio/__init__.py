"""
ClipFX Studio - Parameter animation for timeline clips.

Generates pop-in / pop-out scale curves for captions and transfers tracked
corner curves onto Picture-in-Picture corner pins.
"""

__version__ = "1.0.0"
