"""
report_tables.py — Per-project SDR tables.

Two column profiles:
  ranked  — 8 columns incl. Calls Answered and Connected %, rows sorted by
            Calls Dialed/Hour
  flat    — 7 columns incl. Project, rows in API order
"""

import html as _html
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from call_report import SdrRecord
from call_stats import FLAT, RANKED, format_connected_pct, order_records_by_metric


def _h(s) -> str:
    """HTML-escape a value for safe embedding."""
    return _html.escape(str(s if s is not None else ""), quote=True)


def _num(val) -> str:
    if val is None:
        return ""
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def _text(val) -> str:
    return "" if val is None else str(val)


# header -> cell formatter
Column = Tuple[str, Callable[[SdrRecord], str]]

COLUMNS: Dict[str, List[Column]] = {
    RANKED: [
        ("SDR",                  lambda r: _text(r.sdr)),
        ("Total Calls Dialed",   lambda r: _num(r.total_calls_dialed)),
        ("Calls Answered",       lambda r: _num(r.calls_answered)),
        ("Connected %",          lambda r: format_connected_pct(r.connected)),
        ("No. of working days",  lambda r: _num(r.working_days)),
        ("No. of working hours", lambda r: _num(r.working_hours)),
        ("Calls Dialed/Day",     lambda r: _num(r.calls_dialed_day)),
        ("Calls Dialed/Hour",    lambda r: _num(r.calls_dialed_hour)),
    ],
    FLAT: [
        ("Project",              lambda r: _text(r.project)),
        ("SDR",                  lambda r: _text(r.sdr)),
        ("Total Calls",          lambda r: _num(r.total_calls_dialed)),
        ("No. of working days",  lambda r: _num(r.working_days)),
        ("No. of working hours", lambda r: _num(r.working_hours)),
        ("Calls Dialed/Day",     lambda r: _num(r.calls_dialed_day)),
        ("Calls Dialed/Hour",    lambda r: _num(r.calls_dialed_hour)),
    ],
}


@dataclass(frozen=True)
class Cell:
    header: str
    text: str


@dataclass(frozen=True)
class TableSection:
    title: str
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[Cell, ...], ...]


def render_project_table(project_name: str, records: List[SdrRecord], profile: str = RANKED) -> TableSection:
    """Build the table for one project.

    The ranked profile sorts its rows itself, so callers may pass rows in any
    order; the flat profile keeps them as given.
    """
    if profile not in COLUMNS:
        raise ValueError(f"unknown profile {profile!r}")
    columns = COLUMNS[profile]

    if profile == RANKED:
        records = order_records_by_metric(records)

    rows = tuple(
        tuple(Cell(header, fmt(r)) for header, fmt in columns)
        for r in records
    )
    return TableSection(
        title=project_name,
        headers=tuple(header for header, _ in columns),
        rows=rows,
    )


def render_section_html(section: TableSection) -> str:
    n = len(section.headers)
    width = f"{100 / n:g}%"
    cols = "".join(f'<col style="width:{width}">' for _ in range(n))
    head = "".join(f"<th>{_h(h)}</th>" for h in section.headers)

    body = ""
    for row in section.rows:
        cells = "".join(f'<td data-title="{_h(c.header)}">{_h(c.text)}</td>' for c in row)
        body += f"\n        <tr>{cells}</tr>"

    return f"""
  <div class="project-section">
    <h2 class="project-title">{_h(section.title)}</h2>
    <div class="table-wrap">
      <table aria-label="{_h(section.title)}">
        <colgroup>{cols}</colgroup>
        <thead><tr>{head}</tr></thead>
        <tbody>{body}
        </tbody>
      </table>
    </div>
  </div>"""
