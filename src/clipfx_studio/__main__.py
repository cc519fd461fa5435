"""
ClipFX Studio command line.

Runs the animation operations on a JSON project document.

Usage:
    python -m clipfx_studio animate project.json --selected-only
    python -m clipfx_studio track project.json -o tracked.json --transactional
    python -m clipfx_studio params project.json
"""

import argparse
import logging
import sys
from pathlib import Path

from .animation import (
    animate_captions,
    apply_tracking_data,
    clear_caption_animation,
    fit_captions_to_full_width,
    sync_text_location,
)
from .core.config import Config
from .core.exceptions import ClipFXError, NoTargetError, PreconditionError
from .host import NameClassifier, describe_effect, load_project, save_project
from .host.protocols import ClipKind
from .utils.logger import get_logger, setup_logging_from_config
from .utils.progress import LoggingProgress


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipfx", description="ClipFX Studio - caption and tracking animation"
    )
    parser.add_argument("--config", default=None, help="Pfad zur config.ini (default: Defaults)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-Ausgabe")

    commands = parser.add_subparsers(dest="command", required=True)

    def project_command(name: str, help_text: str, writes: bool = True):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("project", type=Path, help="Project document (JSON)")
        if writes:
            command.add_argument(
                "-o", "--output", type=Path, default=None,
                help="Output document (default: overwrite the input)",
            )
        return command

    for name, help_text in (
        ("animate", "Pop-in / pop-out animation on every caption"),
        ("clear", "Remove the caption pop animation"),
        ("fit-width", "Scale captions so the longest line spans the frame"),
    ):
        project_command(name, help_text).add_argument(
            "--selected-only", action="store_true", help="Only selected captions"
        )

    track = project_command("track", "Copy tracking data onto PiP corner pins")
    track.add_argument(
        "--single-source", action="store_true", help="Fail if more than one source is selected"
    )
    track.add_argument(
        "--transactional", action="store_true", default=None,
        help="Restore all destinations if the transfer fails",
    )

    project_command("sync-location", "Copy the earliest caption's PiP location to the others")
    project_command(
        "params", "Print the effect parameters of the first selected video clip", writes=False
    )
    return parser


def run(args: argparse.Namespace, config: Config) -> str:
    """Execute one sub-command; returns the text to print."""
    logger = get_logger(__name__)
    project = load_project(args.project)
    logger.debug(f"Projekt geladen: {project.name} ({project.frame_rate} fps)")

    if args.command == "params":
        # Nur der erste selektierte Video-Clip
        selected = project.iter_clips(ClipKind.VIDEO, selected_only=True)
        track, clip = next(selected, (None, None))
        if clip is None:
            raise NoTargetError("No selected video event.")
        dumps = [f"[{track.name}/{clip.name}] " + describe_effect(effect) for effect in clip.effects]
        return "\n\n".join(dumps) if dumps else "No effects found."

    if args.command == "animate":
        message = animate_captions(project, config, args.selected_only).summary()
    elif args.command == "clear":
        message = clear_caption_animation(project, config, args.selected_only).summary()
    elif args.command == "fit-width":
        message = fit_captions_to_full_width(project, config, args.selected_only).summary()
    elif args.command == "track":
        result = apply_tracking_data(
            project,
            config,
            progress=LoggingProgress(),
            single_source=args.single_source,
            transactional=args.transactional,
        )
        message = result.summary()
    elif args.command == "sync-location":
        applied = sync_text_location(project, NameClassifier.from_config(config))
        message = f"Location applied to {applied} selected event(s)."
    else:
        raise ValueError(f"Unknown command: {args.command}")

    output = save_project(project, args.output or args.project)
    logger.info(f"Projekt gespeichert: {output}")
    return message


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Returns:
        Exit code (0 = success, 1 = operation refused or failed)
    """
    args = build_parser().parse_args(argv)
    config = Config(args.config, create=False) if args.config else Config(None)
    try:
        setup_logging_from_config(config, args.verbose)
    except ClipFXError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logger = get_logger(__name__)

    try:
        print(run(args, config))
    except PreconditionError as e:
        print(e.message)
        return 1
    except ClipFXError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    logging.captureWarnings(True)
    sys.exit(main())
