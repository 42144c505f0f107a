"""
LatestUpdate Master

Finds the latest cumulative / monthly rollup update for a Windows version and
prints the KB, release note and direct download URL of every package
"""

from __future__ import annotations

import argparse
import csv
import io
import json
import logging
import os
import sys
from typing import List, Optional, Sequence

import requests

from latestupdate_correlator import ResolvedDownload
from latestupdate_pipeline import run_pipeline
from latestupdate_profiles import CATALOG_ARCHITECTURES, VERSION_IDS, WINDOWS10_BUILDS, config_for


# ============================================================
# PATHS
# ============================================================

# Relative to the working directory, so installed copies never write into site-packages
RESULTS_DIR = "results"
RESULT_PATH = os.path.join(RESULTS_DIR, "latestupdate_result.json")


# ============================================================
# ARGUMENTS
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="latestupdate",
        description="Resolve the latest Windows cumulative update to direct download URLs.",
    )
    ap.add_argument("--version", choices=VERSION_IDS, default="Windows10", dest="version_id")
    ap.add_argument("--build", choices=sorted(WINDOWS10_BUILDS, reverse=True), help="Windows 10 only")
    ap.add_argument("--search", help="Catalog title regex (Windows 10 only, cannot be combined with --architecture)")
    ap.add_argument(
        "--architecture",
        default="x64",
        help=f"One of {', '.join(CATALOG_ARCHITECTURES)} (amd64 and 32-bit accepted)",
    )
    ap.add_argument(
        "--raw-markup",
        action="store_true",
        help="Match link markup and scrape notes from the raw page (no parsed DOM)",
    )
    ap.add_argument("--workers", type=int, default=1, help="Parallel DownloadDialog requests")
    ap.add_argument("--strict", action="store_true", help="Fail when notes and URLs cannot be paired")
    ap.add_argument(
        "--include-mirrors",
        action="store_true",
        help="Also accept *.download.windowsupdate.com mirror URLs",
    )
    ap.add_argument("--format", choices=("table", "json", "csv"), default="table", dest="fmt")
    ap.add_argument("-o", "--output", default=RESULT_PATH, help="JSON result file ('' to skip)")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


# ============================================================
# RENDERING
# ============================================================

def status(message: str = "") -> None:
# Progress lines go to stderr so stdout carries only the rendered records

    print(message, file=sys.stderr)


def render_json(records: Sequence[ResolvedDownload]) -> str:
    return json.dumps([r.to_dict() for r in records], indent=2)


def render_csv(records: Sequence[ResolvedDownload]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=["KB", "Note", "URL"], lineterminator="\n")
    writer.writeheader()
    for r in records:
        writer.writerow(r.to_dict())
    return buffer.getvalue()


def render_table(records: Sequence[ResolvedDownload]) -> str:
    lines: List[str] = ["=== Latest Update ==="]
    for r in records:
        lines.append(f"{r.kb:<11} {r.note or '(no note)'}")
        lines.append(f"{'':<11} {r.url}")
    return "\n".join(lines)


RENDERERS = {
    "table": render_table,
    "json": render_json,
    "csv": render_csv,
}


def write_result(path: str, records: Sequence[ResolvedDownload]) -> None:
# Saves the records as JSON, creating the results directory on demand

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(render_json(records))


# ============================================================
# MAIN
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[!] %(name)s: %(message)s",
    )

    try:
        config = config_for(args.version_id, build=args.build, search=args.search, architecture=args.architecture)
    except ValueError as exc:
        status(f"[X] {exc}")
        return 2

    if args.workers < 1:
        status("[X] --workers must be at least 1.")
        return 2

    status(f"[*] Resolving latest update for {args.version_id}...")

    try:
        state = run_pipeline(
            config,
            use_alternate_extraction=args.raw_markup,
            max_workers=args.workers,
            strict=args.strict,
            include_mirrors=args.include_mirrors,
        )
    except requests.RequestException as exc:
        status(f"[X] Request failed: {exc}")
        return 1
    except RuntimeError as exc:
        status(f"[X] {exc}")
        return 1

    if state.article:
        status(f"[+] Article: {state.article.kb}")
    status(f"[+] Candidates: {len(state.candidates)} | Notes: {len(state.notes)} | URLs: {len(state.urls)}")

    if not state.results:
        status("[-] No downloads resolved.")
        return 1

    print(RENDERERS[args.fmt](state.results))

    if args.output:
        write_result(args.output, state.results)
        status(f"[+] Saved result to {args.output}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
