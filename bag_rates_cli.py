#!/usr/bin/env python3
from __future__ import annotations

"""
Command-line runner for season bag rates.

Responsibilities:
- Configure logging to both console and `logs/console.log`
- Resolve settings from `config/settings.yaml` and `RICEMILL_*` variables
- Drive the same workflow as the console page, without a browser:
  * `list`  prints the rates for a crop year and season
  * `set`   edits 100 kg base rates (75 kg / 40 kg derived), then saves
  * `reset` zeroes every rate after the literal confirmation RESET

Rows not named with `--rate` keep the values loaded from the server, so
`set` can change one rice type without retyping the others.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ricemill_admin.api import ApiClient
from ricemill_admin.config import load_settings
from ricemill_admin.io_paths import LOGS_DIR
from ricemill_admin.models import DISPLAY_SIZES, SeasonCode
from ricemill_admin.money import format_bag_size_label
from ricemill_admin.ui_logic import DataManager, WorkflowManager
from ricemill_admin.ui_logic.rate_matrix import RateMatrix
from ricemill_admin.ui_logic.state_manager import ToastVariant
from ricemill_admin.utils_logging import configure_logging


def _parse_rate(text: str) -> Tuple[str, str]:
    code, sep, amount = text.partition("=")
    if not sep or not code.strip():
        raise argparse.ArgumentTypeError(f"Expected CODE=AMOUNT, got '{text}'")
    return code.strip(), amount.strip()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Every sub-command needs `--year` (crop-year start year) and `--season`.
    """
    p = argparse.ArgumentParser(description="Rice Mill Admin – season bag rates")
    p.add_argument("--config", type=str, help="Path to a settings YAML file (default: config/settings.yaml)")
    p.add_argument("--debug", action="store_true")

    sub = p.add_subparsers(dest="command", required=True)

    def _selection_args(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--year", type=int, required=True, help="Crop-year start year, e.g. 2024 for 2024-25")
        sp.add_argument(
            "--season",
            type=str.upper,
            choices=[s.value for s in SeasonCode],
            required=True,
        )

    sp_list = sub.add_parser("list", help="Print the bag rates for a crop year and season")
    _selection_args(sp_list)

    sp_set = sub.add_parser("set", help="Set 100 kg base rates and save")
    _selection_args(sp_set)
    sp_set.add_argument(
        "--rate",
        type=_parse_rate,
        action="append",
        required=True,
        metavar="CODE=AMOUNT",
        help="100 kg rate for a rice type; repeat for several rice types",
    )

    sp_reset = sub.add_parser("reset", help="Set every bag rate of the selection to 0.00")
    _selection_args(sp_reset)
    sp_reset.add_argument("--confirm", type=str, default="", help="Must be exactly RESET")

    return p.parse_args(argv)


def format_matrix(matrix: RateMatrix, names: dict) -> str:
    """Render the matrix as a fixed-width text table."""
    headers = ["Code", "Rice Type"] + [f"{format_bag_size_label(s)} Rate" for s in DISPLAY_SIZES]
    rows = [
        [code, names.get(code, "")] + [matrix.cell(code, s) or "-" for s in DISPLAY_SIZES]
        for code in matrix.codes
    ]
    widths = [max(len(str(r[i])) for r in [headers] + rows) for i in range(len(headers))]
    lines = ["  ".join(str(v).ljust(w) for v, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for r in rows:
        lines.append("  ".join(str(v).ljust(w) for v, w in zip(r, widths)))
    return "\n".join(lines)


def run(args: argparse.Namespace, client: ApiClient, log: logging.Logger) -> int:
    data = DataManager(client)
    workflow = WorkflowManager(client)
    workflow.state_manager.add_listener(
        "toast",
        lambda message, variant: log.log(logging.ERROR if variant is ToastVariant.ERROR else logging.INFO, message),
    )

    ok, error, rice_types = data.load_rice_types()
    if not ok:
        log.error("Could not load rice types: %s", error)
        return 1
    workflow.set_rice_types(rice_types)
    workflow.select(args.year, SeasonCode(args.season))
    names = {rt.code: rt.name for rt in workflow.state.rice_types}

    if not workflow.state.rice_types:
        log.error("No active rice types found. Create rice types first.")
        return 1

    if args.command == "reset":
        outcome = workflow.reset(confirm_text=args.confirm)
    else:
        loaded = workflow.load()
        if not loaded.ok:
            log.error("%s", loaded.message)
            return 1
        if args.command == "list":
            print(format_matrix(workflow.state.matrix, names))
            return 0
        for code, amount in args.rate:
            if code not in names:
                log.error("Unknown or inactive rice type: %s", code)
                return 1
            workflow.edit_base(code, amount)
        if not workflow.state.matrix.is_dirty:
            log.info("No changes.")
            return 0
        outcome = workflow.save()

    if not outcome.ok:
        return 1
    print(format_matrix(workflow.state.matrix, names))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings(Path(args.config) if args.config else None)
    configure_logging(LOGS_DIR, debug=args.debug or settings.debug)
    log = logging.getLogger("bag_rates")
    log.info("Using API %s", settings.api_url("/"))
    client = ApiClient.from_settings(settings)
    return run(args, client, log)


if __name__ == "__main__":
    raise SystemExit(main())
