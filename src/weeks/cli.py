"""Command-line interface for Weeks.

Provides subcommands for setting the birthday, showing life stats and
writing, listing, showing and deleting reflections.
"""

import argparse
import sys
from datetime import datetime

from .app import WeeksApp
from .config import config_from_env
from .errors import StorageError
from .life import parse_birth_date
from .logging import configure_logger
from .notifications import NotificationRequest
from .reflections import Reflection, ReflectionType, parse_reflection_type

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _get_app() -> WeeksApp:
    """Create a WeeksApp with config loaded from the environment."""
    config = config_from_env()
    logger = configure_logger(config.log_dir)
    return WeeksApp(config, logger=logger)


def _format_type(reflection_type: ReflectionType) -> str:
    """Format a reflection type with a color hint."""
    color = "\033[32m" if reflection_type is ReflectionType.SPENT_WELL else "\033[31m"
    return f"{color}{reflection_type.label}\033[0m"


def _format_date(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def format_reflection(reflection: Reflection) -> str:
    """One-line summary of a reflection."""
    text = reflection.explanation.replace("\n", " ")
    if len(text) > 50:
        text = text[:47] + "..."
    return (
        f"{reflection.id:>5}  {_format_date(reflection.date)}  "
        f"{_format_type(reflection.type):<19} {text}"
    )


def format_reflection_detail(reflection: Reflection) -> str:
    """Date, type and the full explanation of one reflection."""
    header = f"{reflection.date.astimezone():%A, %B %d, %Y}  {_format_type(reflection.type)}"
    return f"{header}\n\n{reflection.explanation}"


def format_schedule(request: NotificationRequest) -> str:
    """Describe when a notification repeats."""
    schedule = request.schedule
    when = "Every day" if schedule.weekday is None else f"Every {WEEKDAYS[schedule.weekday]}"
    return f"{when} at {schedule.hour:02d}:{schedule.minute:02d}"


def cmd_birthday(args: argparse.Namespace) -> int:
    """Show, set or clear the birthday."""
    app = _get_app()
    try:
        if args.clear:
            app.clear_birthday()
            print("✓ Birthday cleared.")
            return 0

        if args.date is None:
            if not app.birthday_string:
                print("No birthday set. Run 'weeks birthday YYYY-MM-DD'.")
            else:
                print(f"Birthday: {app.birthday_string}")
            return 0

        birth_date = parse_birth_date(args.date)
        if birth_date is None:
            print(f"❌ Invalid date '{args.date}'. Use YYYY-MM-DD.")
            return 1
        if birth_date > app.clock().date():
            print("❌ Birthday cannot be in the future.")
            return 1

        cached = app.set_birthday(birth_date)
        print(f"✓ Birthday set to {app.birthday_string}")
        print(f"  Weeks remaining: {cached.weeks_remaining:,}")
        return 0
    finally:
        app.close()


def cmd_stats(args: argparse.Namespace) -> int:
    """Show the life stats."""
    app = _get_app()
    try:
        if not app.birthday_string:
            print("No birthday set. Run 'weeks birthday YYYY-MM-DD' first.")

        cached = app.stats(force=args.refresh)
        print("\nLife in Weeks")
        print("-" * 40)
        print(f"Your age:           {cached.age}")
        print(f"Weeks lived:        {cached.weeks_lived:,}")
        print(f"Weeks remaining:    {cached.weeks_remaining:,}")
        print(f"Percentage of life: {cached.percentage}%")
        print(f"\nLast updated {cached.last_computed_at:%Y-%m-%d %H:%M}")
        return 0
    finally:
        app.close()


def cmd_reflect(args: argparse.Namespace) -> int:
    """Write a reflection for today."""
    try:
        reflection_type = parse_reflection_type(args.type)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    app = _get_app()
    try:
        reflection = app.add_reflection(reflection_type, " ".join(args.explanation))
        print(f"✓ Saved reflection {reflection.id}: {_format_type(reflection.type)}")
        return 0
    finally:
        app.close()


def cmd_reflections(args: argparse.Namespace) -> int:
    """List past reflections, newest first."""
    app = _get_app()
    try:
        reflections = app.list_reflections(limit=args.limit)
        if not reflections:
            print("No reflections yet. Your daily reflections will appear here.")
            return 0

        print(f"\n{'ID':>5}  {'Date':<16}  {'Type':<10} Explanation")
        print("-" * 80)
        for reflection in reflections:
            print(format_reflection(reflection))

        print(f"\nTotal: {app.reflections.count()} reflection(s)")
        return 0
    finally:
        app.close()


def cmd_show(args: argparse.Namespace) -> int:
    """Show one reflection in full."""
    app = _get_app()
    try:
        reflection = app.get_reflection(args.id)
        if reflection is None:
            print(f"Reflection {args.id} not found (already deleted?)")
            return 1

        print(format_reflection_detail(reflection))
        return 0
    finally:
        app.close()


def cmd_delete(args: argparse.Namespace) -> int:
    """Delete a reflection by id."""
    app = _get_app()
    try:
        if app.delete_reflection(args.id):
            print(f"✓ Deleted reflection {args.id}")
        else:
            print(f"Reflection {args.id} not found (already deleted?)")
        return 0
    finally:
        app.close()


def cmd_notifications(args: argparse.Namespace) -> int:
    """Show the notifications and when they repeat."""
    app = _get_app()
    try:
        weekly = app.weekly_notification()
        if weekly is None:
            print("Weekly update: not scheduled (no birthday set)")
        else:
            print(f"{weekly.title}: {format_schedule(weekly)}")
            print(f"  {weekly.body}")

        daily = app.daily_notification()
        print(f"{daily.title}: {format_schedule(daily)}")
        print(f"  {daily.body}")
        return 0
    finally:
        app.close()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="weeks",
        description="Your life in weeks, and a daily reflection log",
    )
    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    # birthday command
    birthday_parser = subparsers.add_parser("birthday", help="Show or set your birthday")
    birthday_parser.add_argument("date", nargs="?", help="Birthday as YYYY-MM-DD")
    birthday_parser.add_argument(
        "--clear",
        action="store_true",
        help="Forget the stored birthday",
    )

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Show your life in weeks")
    stats_parser.add_argument(
        "-r", "--refresh",
        action="store_true",
        help="Recompute even if the cached stats are recent",
    )

    # reflect command
    reflect_parser = subparsers.add_parser("reflect", help="Write today's reflection")
    reflect_parser.add_argument("type", help="'spent-well' or 'wasted'")
    reflect_parser.add_argument("explanation", nargs="+", help="What happened today")

    # reflections command
    list_parser = subparsers.add_parser("reflections", help="List past reflections")
    list_parser.add_argument(
        "-n", "--limit",
        type=int,
        default=None,
        help="Show only the N most recent",
    )

    # show command
    show_parser = subparsers.add_parser("show", help="Show one reflection in full")
    show_parser.add_argument("id", type=int, help="ID of the reflection")

    # delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a reflection")
    delete_parser.add_argument("id", type=int, help="ID of the reflection")

    # notifications command
    subparsers.add_parser("notifications", help="Show notification schedule")

    # bot command, handled by main
    subparsers.add_parser("bot", help="Run the Telegram bot")

    return parser


def run_cli(argv: list[str] | None = None) -> int:
    """Run the CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "birthday": cmd_birthday,
        "stats": cmd_stats,
        "reflect": cmd_reflect,
        "reflections": cmd_reflections,
        "show": cmd_show,
        "delete": cmd_delete,
        "notifications": cmd_notifications,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except StorageError as e:
        print(f"❌ Storage error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(run_cli())
