#!/usr/bin/env python3
"""
report_page.py — Call report dashboard generator.

Fetches the SDR call report, builds one table per project and writes a
self-contained index.html (plus an optional JSON snapshot of the rows).

Profiles:
  ranked  (default) — 8 columns, projects and SDRs sorted by Calls Dialed/Hour
  flat              — 7 columns, API order, no sorting

Usage:
    python3 report_page.py
    python3 report_page.py --profile flat --output public/index.html
    CALL_REPORT_URL=https://... python3 report_page.py --json call_report.json
"""

import argparse
import json
import os
import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv

load_dotenv()

from call_report import (
    CALL_REPORT_URL, CallReportError, FetchError, FetchResult, SdrRecord,
    ValidationError, fetch_call_report,
)
from call_stats import PROFILES, RANKED, ordered_groups, summarize
from report_tables import TableSection, _h, render_project_table, render_section_html

HERE = Path(__file__).parent
CONTAINER_ID = "tables-container"
SPINNER_HTML = '<div class="spinner" role="status" aria-label="Loading"></div>'


# ---------------------------------------------------------------------------
# Render target + state machine
# ---------------------------------------------------------------------------

class DomUnavailable(CallReportError):
    """The #tables-container render target is missing."""


class InvalidTransition(CallReportError):
    pass


class PageState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    ERRORED = "errored"


ALLOWED = {
    PageState.IDLE: {PageState.LOADING},
    PageState.LOADING: {PageState.RENDERED, PageState.ERRORED},
    PageState.RENDERED: set(),
    PageState.ERRORED: set(),
}


class RenderTarget:
    """The #tables-container element for one page load."""

    def __init__(self, container_id: str = CONTAINER_ID):
        self.container_id = container_id
        self.inner_html = ""
        self.state = PageState.IDLE
        self.profile = RANKED
        self.records: List[SdrRecord] = []
        self.sections: List[TableSection] = []
        self.skipped: List[ValidationError] = []
        self.error: Optional[FetchError] = None

    def transition(self, new: PageState) -> None:
        if new not in ALLOWED[self.state]:
            raise InvalidTransition(f"{self.state.value} -> {new.value}")
        self.state = new

    def replace(self, html: str) -> None:
        self.inner_html = html


def display_error(target: RenderTarget, message: str) -> None:
    target.replace(f'<p class="error">{_h(message)}</p>')


def render_tables(
    target: Optional[RenderTarget],
    fetch: Callable[[], FetchResult] = fetch_call_report,
    profile: str = RANKED,
) -> RenderTarget:
    """Run one page load: spinner, fetch, then either the tables or an error."""
    if target is None:
        raise DomUnavailable(f"#{CONTAINER_ID} not found")

    target.transition(PageState.LOADING)
    target.profile = profile
    target.replace(SPINNER_HTML)

    result = fetch()
    if not result.ok:
        target.error = result.error
        display_error(target, f"Failed to fetch data: {result.error}")
        print(f"Fetch Error: {result.error!r}", file=sys.stderr)
        target.transition(PageState.ERRORED)
        return target

    for e in result.skipped:
        print(f"  Warning: skipped {e}", file=sys.stderr)

    target.records = list(result.records)
    target.skipped = list(result.skipped)
    target.sections = [
        render_project_table(name, rows, profile)
        for name, rows in ordered_groups(result.records, profile)
    ]
    target.replace("".join(render_section_html(s) for s in target.sections))
    target.transition(PageState.RENDERED)
    return target


# ---------------------------------------------------------------------------
# Page document
# ---------------------------------------------------------------------------

def _styles() -> str:
    return """
<style>
*, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

:root {
  --bg-primary:   #0f1117;
  --bg-card:      #222633;
  --bg-hover:     #2a2f42;
  --border:       #2d3348;
  --text-primary: #e8eaed;
  --text-secondary: #9aa0b4;
  --text-muted:   #5a6078;
  --accent-blue:  #4285f4;
  --accent-red:   #ea4335;
  --radius:       8px;
}

body {
  font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
  background: var(--bg-primary);
  color: var(--text-primary);
  line-height: 1.5;
}

.app-header { display: flex; justify-content: space-between; align-items: baseline; padding: 1.25rem 2rem; border-bottom: 1px solid var(--border); }
.app-header h1 { font-size: 1.15rem; font-weight: 700; }
.header-meta { color: var(--text-secondary); font-size: .8rem; }
.summary { display: flex; gap: 1.5rem; padding: 1rem 2rem 0; color: var(--text-secondary); font-size: .85rem; }
.summary strong { color: var(--text-primary); font-variant-numeric: tabular-nums; }

#tables-container { padding: 1rem 2rem 2rem; }
.project-section { margin-bottom: 2rem; }
.project-title { font-size: 1rem; margin-bottom: .5rem; border-left: 3px solid var(--accent-blue); padding-left: .6rem; }
.table-wrap { background: var(--bg-card); border: 1px solid var(--border); border-radius: var(--radius); overflow-x: auto; }
table { width: 100%; border-collapse: collapse; table-layout: fixed; font-size: .82rem; }
th { text-align: left; padding: .55rem .7rem; color: var(--text-muted); font-size: .72rem; text-transform: uppercase; letter-spacing: .04em; border-bottom: 2px solid var(--border); }
td { padding: .5rem .7rem; border-bottom: 1px solid var(--border); font-variant-numeric: tabular-nums; }
tr:last-child td { border-bottom: none; }
tr:hover td { background: var(--bg-hover); }

.error { color: var(--accent-red); padding: 1rem 0; }

.spinner { width: 36px; height: 36px; margin: 3rem auto; border: 4px solid var(--border); border-top-color: var(--accent-blue); border-radius: 50%; animation: spin 1s linear infinite; }
@keyframes spin { to { transform: rotate(360deg); } }

@media (max-width: 720px) {
  table, thead, tbody, tr, td { display: block; }
  thead { display: none; }
  td { position: relative; padding-left: 50%; }
  td::before { content: attr(data-title); position: absolute; left: .7rem; color: var(--text-muted); }
}
</style>"""


def _summary_bar(target: RenderTarget) -> str:
    if target.state != PageState.RENDERED:
        return ""
    s = summarize(target.records)
    skipped = f'<span><strong>{len(target.skipped)}</strong> rows skipped</span>' if target.skipped else ""
    return f"""
<div class="summary" role="status">
  <span><strong>{s['projects']}</strong> projects</span>
  <span><strong>{s['sdr_rows']}</strong> SDR rows</span>
  <span><strong>{s['total_calls_dialed']:,}</strong> calls dialed</span>
  {skipped}
</div>"""


def _document(target: RenderTarget, generated_at: datetime) -> str:
    gen_fmt = generated_at.strftime("%b %d, %Y %H:%M UTC")
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>SDR Call Report</title>
  {_styles()}
</head>
<body>
<header class="app-header" role="banner">
  <h1>SDR Call Report</h1>
  <div class="header-meta">Updated {_h(gen_fmt)}</div>
</header>
{_summary_bar(target)}
<main>
  <div id="{_h(target.container_id)}">{target.inner_html}</div>
</main>
</body>
</html>"""


def build_page(target: RenderTarget, generated_at: Optional[datetime] = None) -> str:
    if target is None:
        raise DomUnavailable(f"#{CONTAINER_ID} not found")
    return _document(target, generated_at or datetime.now(timezone.utc))


def snapshot(target: RenderTarget, generated_at: datetime) -> dict:
    """JSON-friendly dump of one run."""
    return {
        "generated_at": generated_at.isoformat(),
        "profile": target.profile,
        "state": target.state.value,
        "error": str(target.error) if target.error else None,
        "summary": summarize(target.records),
        "projects": [s.title for s in target.sections],
        "records": [r.to_api() for r in target.records],
        "skipped": [str(e) for e in target.skipped],
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate the SDR call report dashboard")
    parser.add_argument("--profile", choices=PROFILES,
                        default=os.getenv("CALL_REPORT_PROFILE", RANKED),
                        help="column layout (default: ranked, or $CALL_REPORT_PROFILE)")
    parser.add_argument("--url", default=os.getenv("CALL_REPORT_URL", CALL_REPORT_URL),
                        help="report endpoint (default: $CALL_REPORT_URL)")
    parser.add_argument("--output", type=Path, default=HERE / "index.html")
    parser.add_argument("--json", type=Path, dest="json_path",
                        help="also write a JSON snapshot of the fetched rows")
    args = parser.parse_args(argv)

    if args.profile not in PROFILES:
        print(f"ERROR: unknown profile {args.profile!r}", file=sys.stderr)
        return 1

    print("SDR Call Report — Dashboard Generator")
    print("=" * 45)

    now = datetime.now(timezone.utc)

    print(f"Fetching call report from {args.url}...")
    target = render_tables(RenderTarget(), lambda: fetch_call_report(args.url), args.profile)

    if target.state == PageState.RENDERED:
        print(f"  {len(target.records)} rows across {len(target.sections)} projects "
              f"({args.profile} profile)")

    html = build_page(target, generated_at=now)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(html, encoding="utf-8")
    print(f"Written {args.output} ({len(html):,} bytes)")

    if args.json_path:
        with open(args.json_path, "w") as f:
            json.dump(snapshot(target, now), f, indent=2, default=str)
        print(f"Written {args.json_path}")

    return 0 if target.state == PageState.RENDERED else 1


if __name__ == "__main__":
    sys.exit(main())
