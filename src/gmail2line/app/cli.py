from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from gmail2line.app.run import run_once
from gmail2line.config.settings import load_local_config
from gmail2line.errors import Gmail2LineError
from gmail2line.logging_utils import configure_logger


def _parse_now(value: Optional[str]) -> datetime:
    if value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        # Naive values are local wall time, same as the clock below.
        return parsed if parsed.tzinfo else parsed.astimezone()
    # Local clock, aligned to the minute like a scheduler tick.
    return datetime.now().astimezone().replace(second=0, microsecond=0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gmail2line",
        description="Forward unread, labelled Gmail messages to LINE once.",
    )
    parser.add_argument(
        "--secrets-dir",
        dest="secrets_dir",
        type=Path,
        default=None,
        help="Directory with credentials.json and gmail_token.json.",
    )
    parser.add_argument(
        "--line-token",
        dest="line_token",
        default=None,
        help="LINE channel access token (default: LINE_CHANNEL_ACCESS_TOKEN).",
    )
    parser.add_argument(
        "--to",
        dest="forward_line_id",
        default=None,
        help="LINE user/group/room id to push to (default: FORWARD_LINE_ID).",
    )
    parser.add_argument(
        "--interval-minutes",
        dest="interval_minutes",
        default=None,
        help="Lookback window in minutes (default: INTERVAL_MINUTES).",
    )
    parser.add_argument(
        "--label",
        dest="forward_label",
        default=None,
        help="Gmail label to forward (default: FORWARD_LABEL or forward-to-line).",
    )
    parser.add_argument(
        "--now",
        dest="now",
        default=None,
        help="ISO-8601 reference time instead of the local clock.",
    )
    parser.add_argument(
        "--no-browser",
        dest="interactive",
        action="store_false",
        help="Fail instead of opening the Google login flow when no token exists.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = configure_logger("gmail2line")

    try:
        now = _parse_now(args.now)
    except ValueError as exc:
        logger.error("Invalid --now value %r: %s", args.now, exc)
        return 2

    try:
        cfg = load_local_config(
            secrets_dir=args.secrets_dir,
            overrides={
                "LINE_CHANNEL_ACCESS_TOKEN": args.line_token,
                "FORWARD_LINE_ID": args.forward_line_id,
                "INTERVAL_MINUTES": args.interval_minutes,
                "FORWARD_LABEL": args.forward_label,
            },
            interactive=args.interactive,
        )
        summary = run_once(cfg, now)
    except Gmail2LineError as exc:
        logger.error("handler run error: %s", exc)
        return 1

    logger.info("Run completed: %s", json.dumps(summary))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
