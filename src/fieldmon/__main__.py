"""Field monitor entry point.

Usage:
    python -m fieldmon [OPTIONS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --mock           Use the offline mock backend
    --dry-run        Load config and exit
    --version        Show version
"""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .categories import REQUIRED_CATEGORIES, CategoryId, CategoryStatus, spec_for
from .config.loader import load_config
from .config.profiles import detect_profile
from .errors import FieldmonError
from .inference import AudioNote, TextNote, create_gateway
from .session import SessionController

logger = logging.getLogger("fieldmon")

STATUS_MARKERS = {
    CategoryStatus.NOT_STARTED: "[ ]",
    CategoryStatus.IN_PROGRESS: "[~]",
    CategoryStatus.COMPLETE: "[x]",
}

SECTION_COMMANDS = frozenset({"guide", "note", "audio", "notes", "delete", "finalize"})

HELP_TEXT = """Commands:
  list               Show every section and its status
  open <n|id>        Open a section
  guide              Show what to cover in the open section
  note <text>        Add a typed note to the open section
  audio <path>       Add a recorded note from an audio file
  notes              List notes in the open section
  delete <n>         Delete note number n from the open section
  finalize           Check the open section and mark it complete
  back               Return to the section list
  finish             Generate the final report
  report             Show the last generated report
  reset              Discard the job and start over
  quit               Exit"""


def setup_logging(level: str, log_format: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="fieldmon",
        description="Field Monitor - guided field report assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fieldmon                    # Run with auto-detected profile
  python -m fieldmon --profile prod     # Run with production profile
  python -m fieldmon --mock             # Run offline with the mock backend

Environment:
  ANTHROPIC_API_KEY   API key for the Claude backend
  FIELDMON_PROFILE    Set profile (dev, prod, test)
""",
    )
    parser.add_argument("--config", type=Path, help="Path to YAML config file", metavar="PATH")
    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )
    parser.add_argument("--mock", action="store_true", help="Use the offline mock backend")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Field Monitor v{__version__}",
    )
    return parser.parse_args(argv)


def resolve_category(token: str) -> CategoryId:
    """Resolve a list number or category id typed by the user."""
    ids = list(CategoryId)
    if token.isdigit() and 1 <= int(token) <= len(ids):
        return ids[int(token) - 1]
    return CategoryId(token)


def format_dashboard(session: SessionController) -> str:
    """Render the section list."""
    lines = []
    for index, category_id in enumerate(CategoryId, start=1):
        category = session.category(category_id)
        optional = "" if category_id in REQUIRED_CATEGORIES else " (optional)"
        lines.append(
            f"{index}. {STATUS_MARKERS[category.status]} {category.title}{optional}"
            f" - {len(category.notes)} notes"
        )
    ready = "yes" if session.is_job_complete else "no"
    lines.append(f"Ready to finish: {ready}")
    return "\n".join(lines)


def read_audio_note(path: Path) -> AudioNote | None:
    """Load a recorded note from disk, or None if the file cannot be read."""
    mime_type, _ = mimetypes.guess_type(path.name)
    try:
        payload = path.read_bytes()
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return None
    return AudioNote(payload=payload, mime_type=mime_type or "application/octet-stream")


def format_guide(category_id: CategoryId, missing_info: tuple[str, ...]) -> str:
    """Render the capture guide for a section."""
    spec = spec_for(category_id)
    lines = [spec.title, *[f"  - {item}" for item in spec.guide], f'Example: "{spec.example}"']
    if missing_info:
        lines.append("Still missing:")
        lines.extend(f"  ! {item}" for item in missing_info)
    return "\n".join(lines)


async def handle_command(session: SessionController, line: str) -> str | None:
    """Run one shell command and return the text to print.

    Returns:
        Output text, or None when the user asked to quit.
    """
    command, _, argument = line.strip().partition(" ")
    argument = argument.strip()
    active = session.active_category

    if command in ("quit", "exit"):
        return None
    if command == "help" or not command:
        return HELP_TEXT
    if command == "list":
        return format_dashboard(session)
    if command == "open":
        try:
            category_id = resolve_category(argument)
        except ValueError:
            return f"Unknown section: {argument}"
        category = session.select_category(category_id)
        return format_guide(category_id, category.missing_info)
    if command == "back":
        session.back_to_dashboard()
        return format_dashboard(session)
    if command == "finish":
        report = await session.finish_job()
        return report.to_markdown()
    if command == "report":
        return session.report.to_markdown() if session.report else "No report generated yet."
    if command == "reset":
        session.reset()
        return "Job reset."

    if command not in SECTION_COMMANDS:
        return f"Unknown command: {command}. Type 'help' for commands."
    if active is None:
        return "Open a section first (see 'list')."

    if command == "guide":
        return format_guide(active, session.category(active).missing_info)
    if command == "note":
        if not argument:
            return "Usage: note <text>"
        outcome = await session.add_note(active, TextNote(argument))
        if outcome.no_content:
            return "No content detected. Please try again."
        return f"Added note {len(outcome.category.notes)}: {outcome.note.text}"
    if command == "audio":
        if not argument:
            return "Usage: audio <path>"
        source = read_audio_note(Path(argument))
        if source is None:
            return f"Cannot read audio file: {argument}"
        outcome = await session.add_note(active, source)
        if outcome.no_content:
            return "No speech detected. Please try again."
        return f"Added note {len(outcome.category.notes)}: {outcome.note.text}"
    if command == "notes":
        notes = session.category(active).notes
        if not notes:
            return "No notes yet."
        return "\n".join(f"{i}. {note.text}" for i, note in enumerate(notes, start=1))
    if command == "delete":
        notes = session.category(active).notes
        if not argument.isdigit() or not 1 <= int(argument) <= len(notes):
            return f"Usage: delete <1-{len(notes)}>"
        session.delete_note(active, notes[int(argument) - 1].id)
        return "Note deleted."
    if command == "finalize":
        category = await session.finalize_category(active)
        if category.status is CategoryStatus.COMPLETE:
            return f"{category.title} complete.\n{format_dashboard(session)}"
        return format_guide(active, category.missing_info)

    return HELP_TEXT


async def run_shell(session: SessionController) -> int:
    """Run the interactive command loop until the user quits."""
    print(HELP_TEXT + "\n")
    print(format_dashboard(session))

    while True:
        try:
            line = await asyncio.to_thread(input, "\nfieldmon> ")
        except EOFError:
            return 0

        try:
            output = await handle_command(session, line)
        except FieldmonError as e:
            logger.debug(f"Command failed: {e}")
            output = f"Error: {e.user_message}"

        if output is None:
            return 0
        print(output)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the field monitor.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    load_dotenv()
    args = parse_args(argv)

    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=args.profile or detect_profile().value)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except FieldmonError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level, config.logging.format)
    logger.info(f"Field Monitor v{__version__}")
    logger.info(f"Inference: {config.inference.provider}:{config.inference.model}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        return 0

    try:
        gateway = create_gateway(config, use_mock=args.mock)
    except FieldmonError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run_shell(SessionController(gateway)))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        return 0


if __name__ == "__main__":
    sys.exit(main())
