"""
Console runner for the feedback client.

Lists departments, and optionally watches one department's completed
services or submits a single rating.

Usage:
    python -m qms_feedback
    python -m qms_feedback --department 7
    python -m qms_feedback --department 7 --ticket A-012 --rating 5 --comment "Quick"
"""

import argparse
import asyncio
import sys

from qms_feedback.controller.display import LoggingDisplay
from qms_feedback.core.config import get_settings
from qms_feedback.core.logging_config import configure_logging
from qms_feedback.main import feedback_session


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="qms_feedback", description=__doc__.splitlines()[1])
    parser.add_argument("--department", type=int, help="Department ID to watch")
    parser.add_argument("--ticket", help="Ticket number to rate")
    parser.add_argument("--rating", type=int, default=0, help="Rating 1-5")
    parser.add_argument("--comment", default="", help="Optional comment")
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Seconds to keep polling (default: until interrupted)",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()

    async with feedback_session(LoggingDisplay(), settings) as controller:
        if not await controller.load_departments():
            return 1

        if args.department is None:
            return 0

        departments = controller.state.departments or ()
        department = next((d for d in departments if d.id == args.department), None)
        if department is None:
            print(f"Department {args.department} not found", file=sys.stderr)
            return 1

        controller.select_department(department)

        if args.ticket:
            result = await controller.submit_feedback(args.ticket, args.rating, args.comment)
            if not result.accepted:
                return 1
            # Let the acknowledgement and the follow-up poll land
            await asyncio.sleep(settings.acknowledgement_seconds)
            return 0

        if args.duration is not None:
            await asyncio.sleep(args.duration)
        else:
            await asyncio.Event().wait()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(get_settings().log_level)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
