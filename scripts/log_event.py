#!/usr/bin/env python3
"""
Healthy Habits command-line logger.

Collects a food, drink or toilet entry and hands it to the event submission
client, which POSTs it to the webhook in the background.

Usage:
    python scripts/log_event.py food --item Apple --amount 1 --at 08:30
    python scripts/log_event.py drink --item Water --amount "0.5 l"
    python scripts/log_event.py toilet --action pee --at 07:15
    python scripts/log_event.py interactive
"""

import sys
import logging
import argparse
from datetime import datetime
from typing import Callable, Iterator, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from habit_events import ToiletAction
from habit_submission import EventSubmissionClient, SubmissionResult, get_settings


# Load environment variables
load_dotenv()

ENTRY_TYPES = ["food", "drink", "toilet"]

# Extra seconds granted to in-flight submissions before the script exits
EXIT_GRACE_SECONDS = 5.0


class RememberedValues:
    """Previously entered texts for one category, in entry order."""

    def __init__(self, category: str):
        self.category = category
        self._values: List[str] = []

    def remember(self, value: str) -> bool:
        """Append a value; empty strings are ignored. Duplicates are kept."""
        if not value:
            return False
        self._values.append(value)
        return True

    def pick(self, number: int) -> str:
        """Return the value shown as ``number`` (1-based)."""
        if number < 1 or number > len(self._values):
            raise IndexError(f"No remembered {self.category} #{number}")
        return self._values[number - 1]

    @property
    def values(self) -> List[str]:
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)


def parse_time_of_day(text: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Resolve an ``HH:MM`` time of day to today's local date.

    Args:
        text: Time of day, or None/empty for the current time
        now: Reference "now" (defaults to the local current time)

    Returns:
        Timezone-aware local datetime

    Raises:
        ValueError: If text is not a valid HH:MM time
    """
    now = now or datetime.now().astimezone()
    if not text:
        return now

    parsed = datetime.strptime(text.strip(), "%H:%M")
    # UTC offset comes from the chosen wall-clock time, not from now
    local_day = now.astimezone().replace(tzinfo=None)
    wall_clock = local_day.replace(hour=parsed.hour, minute=parsed.minute, second=0, microsecond=0)
    return wall_clock.astimezone()


def _time_argument(text: str) -> datetime:
    try:
        return parse_time_of_day(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected HH:MM, got {text!r}")


def print_result(result: SubmissionResult) -> None:
    """Console completion handler."""
    if result.ok:
        print(f"[INFO] {result.event_type.capitalize()} data sent successfully.")
    elif result.status_code is not None:
        print(f"[WARN] {result.event_type.capitalize()} data rejected: HTTP {result.status_code}")
    else:
        print(f"[ERROR] Failed to send {result.event_type} data: {result.error}")


# ============================================================================
# Interactive form
# ============================================================================


def ask_text(
    label: str,
    remembered: Optional[RememberedValues],
    read: Callable[[str], str],
) -> str:
    """
    Ask for a text field, offering remembered values by number.

    New non-empty answers are remembered for the rest of the session
    automatically, with no separate "remember" step.
    """
    if remembered is not None and len(remembered):
        for number, value in enumerate(remembered, start=1):
            print(f"  {number}) {value}")
        label = f"{label} (number to reuse)"

    answer = read(f"{label}: ").strip()

    if remembered is None:
        return answer
    if answer.isdigit() and len(remembered):
        try:
            return remembered.pick(int(answer))
        except IndexError as e:
            print(f"[WARN] {e}, using {answer!r} as typed")
    remembered.remember(answer)
    return answer


def ask_time(label: str, read: Callable[[str], str]) -> datetime:
    """Ask for a time of day until a valid one (or blank for now) is given."""
    while True:
        answer = read(f"{label} [HH:MM, blank = now]: ").strip()
        try:
            return parse_time_of_day(answer)
        except ValueError:
            print(f"[ERROR] Not a time of day: {answer!r}")


def run_interactive(
    client: EventSubmissionClient,
    read: Callable[[str], str] = input,
) -> int:
    """
    Prompt for entries until the user quits.

    Returns:
        Number of entries handed to the submission client
    """
    foods = RememberedValues("food")
    drinks = RememberedValues("drink")
    submitted = 0

    while True:
        try:
            entry_type = read(f"Entry type ({'/'.join(ENTRY_TYPES)}, q to quit): ").strip().lower()
        except EOFError:
            break

        if entry_type in ("q", "quit", "exit"):
            break

        try:
            if entry_type == "food":
                item = ask_text("What did you eat?", foods, read)
                amount = ask_text("How much did you eat?", None, read)
                at = ask_time("When did you eat?", read)
                client.submit_food_event(item, amount, at)
            elif entry_type == "drink":
                item = ask_text("What did you drink?", drinks, read)
                amount = ask_text("How much did you drink?", None, read)
                at = ask_time("When did you drink?", read)
                client.submit_drink_event(item, amount, at)
            elif entry_type == "toilet":
                action = ask_text("Action (poop/pee)", None, read)
                at = ask_time("When did you take the action?", read)
                client.submit_toilet_event(action, at)
            else:
                print(f"[WARN] Unknown entry type: {entry_type!r}")
                continue
        except EOFError:
            break
        except ValidationError as e:
            print(f"[ERROR] Invalid entry: {e.errors()[0]['msg']}")
            continue

        submitted += 1

    return submitted


# ============================================================================
# Entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Log food, drink and toilet entries to the Healthy Habits webhook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Log a meal eaten at 08:30 today
  python scripts/log_event.py food --item Apple --amount 1 --at 08:30

  # Log a drink right now
  python scripts/log_event.py drink --item Water --amount "0.5 l"

  # Log a toilet visit
  python scripts/log_event.py toilet --action pee --at 07:15

  # Prompt for entries, reusing remembered foods and drinks
  python scripts/log_event.py interactive
        """,
    )
    parser.add_argument(
        "--url",
        help="Webhook URL (default: HABITS_WEBHOOK_URL or the built-in endpoint)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for kind, verb in (("food", "eat"), ("drink", "drink")):
        sub = subparsers.add_parser(kind, help=f"Log what you {verb}")
        sub.add_argument("--item", default="", help=f"What did you {verb}?")
        sub.add_argument("--amount", default="", help=f"How much did you {verb}?")
        sub.add_argument(
            "--at",
            type=_time_argument,
            help="Time of day as HH:MM (default: now)",
        )

    toilet = subparsers.add_parser("toilet", help="Log a toilet visit")
    toilet.add_argument(
        "--action",
        choices=[action.value.lower() for action in ToiletAction],
        default="poop",
        help="What happened (default: poop)",
    )
    toilet.add_argument(
        "--at",
        type=_time_argument,
        help="Time of day as HH:MM (default: now)",
    )

    subparsers.add_parser("interactive", help="Prompt for entries until quit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = EventSubmissionClient(webhook_url=args.url, on_complete=print_result)

    try:
        if args.command == "food":
            client.submit_food_event(args.item, args.amount, args.at or parse_time_of_day(None))
        elif args.command == "drink":
            client.submit_drink_event(args.item, args.amount, args.at or parse_time_of_day(None))
        elif args.command == "toilet":
            client.submit_toilet_event(args.action, args.at or parse_time_of_day(None))
        elif args.command == "interactive":
            count = run_interactive(client)
            print(f"\n[INFO] {count} entries submitted")
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
    finally:
        client.join_pending(timeout=client.timeout + EXIT_GRACE_SECONDS)

    return 0


if __name__ == "__main__":
    sys.exit(main())
