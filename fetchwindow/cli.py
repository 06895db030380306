# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Command-line interface to the scheduler.
#
# COMMANDS:
# ---------
# 1. Seed an empty store with synthetic history:
#    python -m fetchwindow.cli seed --weeks 4
#
# 2. Show the next best transfer slot:
#    python -m fetchwindow.cli next
#    python -m fetchwindow.cli next --date 2026-10-20 --json
#
# 3. List today's usable Wi-Fi / mobile slots:
#    python -m fetchwindow.cli slots
#
# 4. Coarse "first usable bucket" lookup:
#    python -m fetchwindow.cli when
#
# 5. Check whether the live link is good enough right now:
#    python -m fetchwindow.cli fetchable
#
# Store, probe and thresholds come from the environment / .env
# (see fetchwindow.config).
#
# ==============================================

import argparse
import asyncio
import json
import sys
from datetime import date, datetime
from typing import List, Optional

from fetchwindow.config import AppConfig, build_store, get_config
from fetchwindow.errors import FetchWindowError, NoGoodTimeToday
from fetchwindow.logging_utils import setup_logging
from fetchwindow.session import AnalysisSession
from fetchwindow.storage import SampleGenerator, StoreStatus


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fetchwindow",
        description="Pick the best upcoming window for a data transfer.",
    )
    parser.add_argument("--verbose", action="store_true", help="Echo warnings to stderr.")
    sub = parser.add_subparsers(dest="command")

    seed_cmd = sub.add_parser("seed", help="Fill the store with synthetic history.")
    seed_cmd.add_argument("--weeks", type=int, help="Weeks of history to generate.")
    seed_cmd.add_argument("--seed", type=int, help="Random seed for repeatable data.")
    seed_cmd.add_argument(
        "--force",
        action="store_true",
        help="Add samples even if the store already holds data.",
    )

    next_cmd = sub.add_parser("next", help="Show the next best transfer slot.")
    next_cmd.add_argument("--date", type=_parse_date, help="Day to analyse.")
    next_cmd.add_argument("--json", action="store_true", help="Print JSON.")

    slots_cmd = sub.add_parser("slots", help="List usable slots for the day.")
    slots_cmd.add_argument("--date", type=_parse_date, help="Day to analyse.")
    slots_cmd.add_argument("--json", action="store_true", help="Print JSON.")

    when_cmd = sub.add_parser("when", help="First usable bucket at or after now.")
    when_cmd.add_argument("--date", type=_parse_date, help="Day to analyse.")

    sub.add_parser("fetchable", help="Check the live link right now.")
    sub.add_parser("status", help="Show session status after analysis.")
    return parser


def cmd_seed(config: AppConfig, args: argparse.Namespace) -> int:
    store = build_store(config)
    try:
        status = store.open()
        if status is StoreStatus.ERROR:
            print("✗ Could not open the sample store.")
            return 1
        if status is StoreStatus.READY and not args.force:
            print("⚠ Store already holds samples (use --force to add more).")
            return 1

        generator = SampleGenerator(
            weeks=args.weeks or config.analysis.seed_weeks,
            bucket_minutes=config.analysis.bucket_minutes,
            seed=args.seed if args.seed is not None else config.analysis.seed,
        )
        added = store.add_samples(generator.generate())
        store.save()
        print(f"✓ Seeded {added} samples ({generator.weeks} weeks)")
        return 0
    finally:
        store.close()


async def _analysed_session(config: AppConfig, day: Optional[date]) -> AnalysisSession:
    session = AnalysisSession.from_config(config)
    result = await session.init()
    if not result.ok:
        session.store.close()
        raise result.error
    if day is not None:
        await session.run_analysis(day)
    return session


def cmd_next(session: AnalysisSession, args: argparse.Namespace) -> int:
    recommendation = session.next_best_slot()
    if args.json:
        print(json.dumps(recommendation.to_dict(), indent=2))
        return 0

    if recommendation.found:
        slot = recommendation.slot
        print(f"✓ {recommendation.time:%Y-%m-%d %H:%M} via {recommendation.channel.value}")
        print(f"   → {recommendation.reason}")
        print(
            f"   → Wi-Fi {slot.avg_wifi_link_speed:.1f} Mbps, "
            f"{slot.avg_wifi_bytes_per_second:.0f} B/s, signal {slot.avg_wifi_signal_strength:.0f}; "
            f"mobile {slot.avg_mobile_bytes_per_second:.0f} B/s, "
            f"signal {slot.avg_mobile_signal_strength:.0f}"
        )
    else:
        print(f"⚠ {recommendation.reason}")
    return 0


def cmd_slots(session: AnalysisSession, args: argparse.Namespace) -> int:
    if args.json:
        payload = {
            "date": session.date.isoformat() if session.date else None,
            "wifi": [slot.to_dict() for slot in session.wifi_slots],
            "mobile": [slot.to_dict() for slot in session.mobile_slots],
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"Slots for {session.date}:")
    print(f"   Wi-Fi ({len(session.wifi_slots)}): "
          + ", ".join(f"{s.time_of_day:%H:%M}" for s in session.wifi_slots))
    print(f"   Mobile ({len(session.mobile_slots)}): "
          + ", ".join(f"{s.time_of_day:%H:%M}" for s in session.mobile_slots))
    if session.corrupt_buckets:
        indexes = ", ".join(str(e.bucket_index) for e in session.corrupt_buckets)
        print(f"⚠ Skipped corrupt buckets: {indexes}")
    return 0


def cmd_when(session: AnalysisSession, args: argparse.Namespace) -> int:
    now = datetime.now()
    if session.date and session.date != now.date():
        now = datetime.combine(session.date, datetime.min.time())
    try:
        found = session.next_best_time(now)
    except NoGoodTimeToday as e:
        print(f"⚠ {e}")
        return 0
    print(f"✓ {found:%Y-%m-%d %H:%M}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    config = get_config()
    setup_logging(config.log_dir, config.log_level, verbose=args.verbose)

    if args.command == "seed":
        return cmd_seed(config, args)

    if args.command == "fetchable":
        session = AnalysisSession.from_config(config)
        if session.probe is None:
            print("⚠ No LINK_STATUS_URL configured; cannot probe the live link.")
            return 1
        fetchable = session.is_fetchable_now()
        print("✓ Fetchable now" if fetchable else "✗ Not fetchable now")
        return 0 if fetchable else 2

    try:
        session = asyncio.run(_analysed_session(config, getattr(args, "date", None)))
    except FetchWindowError as e:
        print(f"✗ [{e.code}] {e}")
        return 1

    try:
        if args.command == "next":
            return cmd_next(session, args)
        if args.command == "slots":
            return cmd_slots(session, args)
        if args.command == "when":
            return cmd_when(session, args)
        if args.command == "status":
            print(json.dumps(session.get_status(), indent=2))
            return 0
    finally:
        session.store.close()

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
