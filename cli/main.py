#!/usr/bin/env python3
"""moodspend CLI

Commands:
- log-stress   record a mood entry (score derived from mood text)
- log-expense  record an expense or income entry
- sync         recompute and store daily summaries for the last N days
- summary      show one day's summary
- insight      show the stress-vs-spend report for the last N days
"""

import argparse
import json
import logging
import sys

from moodspend import config
from moodspend.errors import MoodspendError
from moodspend.insights.date_range import build_date_range, to_date
from moodspend.journal import Journal
from moodspend.models import DailySummary, StressSpendInsight
from moodspend.observability import RunContext, configure_logging
from moodspend.store import SQLiteStore
from moodspend.sync import (
    load_stress_spend_insight,
    sync_daily_summaries_for_range,
    update_daily_summary_for_date,
)

logger = logging.getLogger(__name__)


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def print_table(headers: list, rows: list, widths: list = None):
    """Print a simple table."""
    if not widths:
        widths = [max(len(str(row[i])) for row in [headers] + rows) for i in range(len(headers))]

    header_str = " │ ".join(str(h).ljust(w) for h, w in zip(headers, widths))
    print(header_str)
    print("─" * len(header_str))

    for row in rows:
        print(" │ ".join(str(c)[:w].ljust(w) for c, w in zip(row, widths)))


def print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def print_summary(summary: DailySummary) -> None:
    print_header(f"SUMMARY {summary.date}")
    if summary.stress_count:
        print(
            f"  Stress: avg {summary.stress_score_avg} / max {summary.stress_score_max}"
            f" ({summary.stress_count} entries)"
        )
        print(f"  Mood: {summary.top_mood or '-'}   Context: {summary.top_context or '-'}")
    else:
        print("  Stress: no entries")
    print(f"  Spent: {summary.daily_expense:,}")
    if summary.top_categories:
        print()
        print_table(
            ["Category", "Amount"],
            [[c.category, f"{c.amount:,}"] for c in summary.top_categories],
        )
    if summary.ai:
        print(f"\n  Coaching: {summary.ai.summary}")


def print_insight(insight: StressSpendInsight) -> None:
    print_header(f"STRESS × SPEND — last {insight.period_days} days")
    spike = "  ⚠ spike" if insight.spend_spike else ""
    print(f"  Focus day spent: {insight.daily_expense:,}   Avg/day: {insight.avg_expense:,}{spike}")
    ratio = f"{insight.ratio_high_low:.2f}" if insight.ratio_high_low is not None else "-"
    print(f"  High/Low ratio: {ratio}")
    print()
    print_table(
        ["Bucket", "Days", "Avg/day"],
        [[b.bucket.value, b.day_count, f"{b.avg_daily_expense:,}"] for b in insight.bucket_summaries],
    )
    if insight.mood_category_top:
        print()
        print_table(
            ["Mood", "Spent", "Top categories"],
            [
                [m.mood, f"{m.total_expense:,}", ", ".join(c.category for c in m.top_categories)]
                for m in insight.mood_category_top
            ],
        )
    print()
    print(f"  {insight.pattern_summary}")
    print(f"  {insight.trigger_summary}")


def cmd_log_stress(store: SQLiteStore, args) -> None:
    event = Journal(store).record_stress(
        args.owner,
        {"date": args.date, "mood": args.mood, "context": args.context, "memo": args.memo},
    )
    print(f"OK: stress entry {event.id} ({event.date}, score {event.score})")


def cmd_log_expense(store: SQLiteStore, args) -> None:
    event = Journal(store).record_expense(
        args.owner,
        {
            "date": args.date,
            "category": args.category,
            "amount": args.amount,
            "type": args.type,
            "memo": args.memo,
        },
    )
    print(f"OK: {event.type} entry {event.id} ({event.date}, {event.amount:,})")


def cmd_sync(store: SQLiteStore, args) -> None:
    dates = build_date_range(args.days, args.end)
    summaries = sync_daily_summaries_for_range(store, args.owner, dates)
    if args.json:
        print_json([s.to_dict() for s in summaries])
        return
    print_header(f"SYNCED {len(summaries)} DAYS")
    print_table(
        ["Date", "Stress", "Entries", "Spent", "Top mood"],
        [
            [s.date, s.stress_score_avg, s.stress_count, f"{s.daily_expense:,}", s.top_mood or "-"]
            for s in summaries
        ],
    )


def cmd_summary(store: SQLiteStore, args) -> None:
    summary = update_daily_summary_for_date(store, args.owner, to_date(args.date).isoformat())
    if args.json:
        print_json(summary.to_dict())
    else:
        print_summary(summary)


def cmd_insight(store: SQLiteStore, args) -> None:
    insight = load_stress_spend_insight(
        store, args.owner, args.days, end_date=args.end, focus_date=args.focus
    )
    if args.json:
        print_json(insight.to_dict())
    else:
        print_insight(insight)


COMMANDS = {
    "log-stress": cmd_log_stress,
    "log-expense": cmd_log_expense,
    "sync": cmd_sync,
    "summary": cmd_summary,
    "insight": cmd_insight,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="moodspend", description="Stress × spending journal")
    p.add_argument("--db", default=None, help="SQLite path (default: MOODSPEND_DB or ~/.moodspend)")
    p.add_argument("--owner", required=True, help="Owner id")
    p.add_argument("--log-level", default=config.LOG_LEVEL)
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("log-stress")
    s.add_argument("--date", required=True, help="YYYY-MM-DD")
    s.add_argument("--mood", required=True)
    s.add_argument("--context", default="")
    s.add_argument("--memo", default="")

    e = sub.add_parser("log-expense")
    e.add_argument("--date", required=True, help="YYYY-MM-DD")
    e.add_argument("--category", required=True)
    e.add_argument("--amount", required=True)
    e.add_argument("--type", default="expense", choices=["expense", "income"])
    e.add_argument("--memo", default="")

    y = sub.add_parser("sync")
    y.add_argument("--days", type=int, default=config.DEFAULT_PERIOD_DAYS)
    y.add_argument("--end", default=None, help="Last day of the range (default: today)")
    y.add_argument("--json", action="store_true")

    d = sub.add_parser("summary")
    d.add_argument("--date", required=True, help="YYYY-MM-DD")
    d.add_argument("--json", action="store_true")

    i = sub.add_parser("insight")
    i.add_argument("--days", type=int, default=config.DEFAULT_PERIOD_DAYS)
    i.add_argument("--end", default=None, help="Last day of the window (default: today)")
    i.add_argument("--focus", default=None, help="Day checked for a spend spike")
    i.add_argument("--json", action="store_true")

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_format=config.LOG_JSON)

    with RunContext():
        try:
            store = SQLiteStore(args.db)
            COMMANDS[args.cmd](store, args)
        except MoodspendError as e:
            logger.error("%s failed: %s", args.cmd, e)
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
