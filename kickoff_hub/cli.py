# kickoff_hub/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from kickoff_hub.config import DEFAULT_HTML_FILE, SORT_MODES, SUPPORTED_FORMATS, SheetConfig
from kickoff_hub.filters import Filters, apply_filters
from kickoff_hub.models import GameRecord, RowProblem
from kickoff_hub.render import render_page
from kickoff_hub.sheets.loader import SheetLoader
from kickoff_hub.state import AppState, View


def games_frame(games: Sequence[GameRecord]) -> pd.DataFrame:
    rows = [
        {"title": g.title, "platform": ", ".join(g.platforms), "genre": g.genre, "station": g.station}
        for g in games
    ]
    return pd.DataFrame(rows, columns=["title", "platform", "genre", "station"])


def problems_frame(problems: Sequence[RowProblem]) -> pd.DataFrame:
    rows = [
        {"row": p.row_number, "title": p.title or "(empty)", "problems": "; ".join(p.problems)}
        for p in problems
    ]
    return pd.DataFrame(rows, columns=["row", "title", "problems"])


def build_parser(env: Optional[SheetConfig] = None) -> argparse.ArgumentParser:
    env = env or SheetConfig.from_env()
    p = argparse.ArgumentParser(description="Kickoff Game Hub: game library kiosk fed by a published Google Sheet.")
    p.add_argument("--sheet-id", default=env.sheet_id, help="Spreadsheet document id (env KICKOFF_SHEET_ID)")
    p.add_argument("--games-tab", default=env.games_tab, help="Games tab name (default: Games)")
    p.add_argument("--games-gid", default=env.games_gid, help="Numeric games tab id, tried after the tab name fails")
    p.add_argument("--stations-tab", default=env.stations_tab, help="Optional stations tab name ('' to skip)")
    p.add_argument("--format", dest="fmt", choices=SUPPORTED_FORMATS, default=env.fmt, help="Export endpoint variant")

    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--ui", action="store_true", help="Launch the Textual kiosk")
    mode.add_argument("--html", nargs="?", const=DEFAULT_HTML_FILE, default=None, help="Write a static kiosk page")
    mode.add_argument("--validate", action="store_true", help="Print rows that need attention")

    p.add_argument("--search", default="", help="Free-text filter (title, platform, genre)")
    p.add_argument("--platform", default="", help="Platform filter")
    p.add_argument("--genre", default="", help="Genre filter")
    p.add_argument("--sort", choices=SORT_MODES, default="title_asc")
    p.add_argument("--view", choices=[v.value for v in View], default=View.GAMES.value, help="Visible panel in --html output")
    return p


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> SheetConfig:
    return SheetConfig(
        sheet_id=args.sheet_id,
        games_tab=args.games_tab,
        games_gid=(args.games_gid or "").strip(),
        stations_tab=(args.stations_tab or "").strip(),
        fmt=args.fmt,
    )


def main(argv: Optional[Sequence[str]] = None, *, loader: Optional[SheetLoader] = None) -> int:
    args = parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Bad configuration: {e}", file=sys.stderr)
        return 2

    loader = loader or SheetLoader(config)

    if args.ui:
        # UI mode; imported here so the other modes don't pay for Textual
        from kickoff_hub.ui.app import KioskApp

        KioskApp(loader=loader).run()
        return 0

    state = AppState(games_tab=config.games_tab)
    if not state.refresh(loader):
        print(state.status.text, file=sys.stderr)
        return 1

    filters = Filters(query=args.search, platform=args.platform, genre=args.genre, sort=args.sort)

    if args.validate:
        if not state.problems:
            print(f"All {len(state.games)} rows look good.")
            return 0
        print(problems_frame(state.problems).to_string(index=False))
        return 0

    if args.html:
        state.set_view(args.view)
        out = Path(args.html).expanduser().resolve()
        out.write_text(render_page(state, filters), encoding="utf-8")
        print(f"Wrote: {out} ({state.status.text})")
        return 0

    # list mode
    listed = apply_filters(state.games, filters)
    if listed:
        print(games_frame(listed).to_string(index=False))
    else:
        print("No games found.")
    print(f"\n{state.status.text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
