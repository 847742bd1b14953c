"""
call_stats.py — Group SDR rows by project and rank them.

Pure functions over SdrRecord lists. No presentation logic here apart from
the Connected % formatter, which the table renderer and the JSON snapshot
both use.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from call_report import SdrRecord

RANKED = "ranked"
FLAT = "flat"
PROFILES = (RANKED, FLAT)


@dataclass(frozen=True)
class ProjectTotal:
    project: str
    total: float


def _metric(record: SdrRecord) -> float:
    return record.calls_dialed_hour or 0


def group_by_project(records: Iterable[SdrRecord]) -> dict[str, list[SdrRecord]]:
    """Partition rows by project, groups in first-seen order, rows in input order."""
    groups: dict[str, list[SdrRecord]] = {}
    for r in records:
        groups.setdefault(r.project, []).append(r)
    return groups


def compute_project_totals(groups: dict[str, list[SdrRecord]]) -> list[ProjectTotal]:
    """Sum Calls Dialed/Hour per project."""
    return [
        ProjectTotal(project, sum(_metric(r) for r in rows))
        for project, rows in groups.items()
    ]


def order_projects(totals: list[ProjectTotal]) -> list[str]:
    """Project names by total descending. sorted() is stable so ties keep input order."""
    return [t.project for t in sorted(totals, key=lambda t: t.total, reverse=True)]


def order_records_by_metric(records: list[SdrRecord]) -> list[SdrRecord]:
    return sorted(records, key=_metric, reverse=True)


def ordered_groups(records: Iterable[SdrRecord], profile: str = RANKED) -> list[tuple[str, list[SdrRecord]]]:
    """(project, rows) pairs in display order for the given profile."""
    if profile not in PROFILES:
        raise ValueError(f"unknown profile {profile!r}, expected one of {', '.join(PROFILES)}")

    groups = group_by_project(records)
    if profile == FLAT:
        return list(groups.items())

    names = order_projects(compute_project_totals(groups))
    return [(name, order_records_by_metric(groups[name])) for name in names]


def format_connected_pct(value: float | None) -> str:
    """Ratio -> percentage with two decimals (0.1811 -> '18.11%').

    Rounds half-up on the decimal value as written, so 0.18115 gives
    '18.12%' regardless of its binary float representation.
    """
    if value is None:
        return ""
    pct = (Decimal(str(value)) * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{pct}%"


def summarize(records: list[SdrRecord]) -> dict:
    """Header KPIs for the page."""
    return {
        "projects": len(group_by_project(records)),
        "sdr_rows": len(records),
        "total_calls_dialed": sum(r.total_calls_dialed or 0 for r in records),
    }
