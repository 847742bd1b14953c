"""
call_report.py — Fetch the SDR call report from the Sheetlabs API.

One GET per run, no retries. The response is a JSON array of flat rows (one
per SDR per project); every row is validated into an SdrRecord here so the
rest of the pipeline never sees raw dicts.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

CALL_REPORT_URL = "https://app.sheetlabs.com/K3/call_rprt"

# attribute -> (wire field, kind)
FIELDS = {
    "project":            ("Project", "str"),
    "sdr":                ("SDR", "str"),
    "total_calls_dialed": ("TotalCallsDialed", "int"),
    "calls_answered":     ("CallsAnswered", "int"),
    "connected":          ("Connected", "float"),
    "working_days":       ("Noofworkingdays", "int"),
    "working_hours":      ("Noofworkinghours", "int"),
    "calls_dialed_day":   ("CallsDialedDay", "float"),
    "calls_dialed_hour":  ("CallsDialedHour", "float"),
}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class CallReportError(Exception):
    """Base class for everything this dashboard raises."""


class FetchError(CallReportError):
    """The call report could not be fetched; the run stops here."""


class NetworkError(FetchError):
    def __init__(self, status_code: Optional[int] = None, detail: str = ""):
        self.status_code = status_code
        if status_code is not None:
            msg = f"Network response was not ok (Status: {status_code})"
        else:
            msg = f"Network request failed: {detail}" if detail else "Network request failed"
        super().__init__(msg)


class ParseError(FetchError):
    pass


class ValidationError(CallReportError):
    """A single row failed the schema. The row is skipped, the run continues."""

    def __init__(self, index: int, field_name: str, reason: str):
        self.index = index
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"row {index}: {field_name} {reason}")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SdrRecord:
    project: str
    sdr: Optional[str] = None
    total_calls_dialed: Optional[int] = None
    calls_answered: Optional[int] = None
    connected: Optional[float] = None
    working_days: Optional[int] = None
    working_hours: Optional[int] = None
    calls_dialed_day: Optional[float] = None
    calls_dialed_hour: Optional[float] = None

    @classmethod
    def from_api(cls, row: Any, index: int = 0) -> "SdrRecord":
        """Validate one API row. Missing/null fields become None."""
        if not isinstance(row, dict):
            raise ValidationError(index, "row", f"is {type(row).__name__}, expected an object")

        values = {}
        for attr, (wire, kind) in FIELDS.items():
            values[attr] = _coerce(row.get(wire), kind, index, wire)

        # Project is the grouping key and is kept verbatim; "A " and "A" are different projects
        if not values["project"] or not values["project"].strip():
            raise ValidationError(index, "Project", "is missing")
        if values["connected"] is not None and not 0 <= values["connected"] <= 1:
            raise ValidationError(index, "Connected", f"is outside 0..1: {values['connected']!r}")
        return cls(**values)

    def to_api(self) -> Dict[str, Any]:
        return {wire: getattr(self, attr) for attr, (wire, _) in FIELDS.items()}


def _coerce(val: Any, kind: str, index: int, wire: str):
    if val is None:
        return None
    # bool is an int subclass; a True in a numeric column is a broken sheet
    if isinstance(val, (bool, list, dict)):
        raise ValidationError(index, wire, f"has unexpected type {type(val).__name__}")

    if kind == "str":
        if isinstance(val, str):
            return val
        if isinstance(val, (int, float)):
            return str(val)
        raise ValidationError(index, wire, f"has unexpected type {type(val).__name__}")

    if isinstance(val, str):
        text = val.strip().replace(",", "")
        if not text:
            return None
        try:
            val = float(text)
        except ValueError:
            raise ValidationError(index, wire, f"is not a number: {val!r}")

    if not isinstance(val, (int, float)):
        raise ValidationError(index, wire, f"has unexpected type {type(val).__name__}")
    # json decodes NaN/Infinity and float() accepts "nan"/"inf"
    if not math.isfinite(val):
        raise ValidationError(index, wire, "is not a finite number")

    if kind == "int":
        if isinstance(val, float):
            if not val.is_integer():
                raise ValidationError(index, wire, f"is not a whole number: {val!r}")
            return int(val)
        return val
    return float(val)


def parse_records(payload: Any) -> Tuple[List[SdrRecord], List[ValidationError]]:
    """Validate a decoded payload. Bad rows are returned separately, not raised."""
    if not isinstance(payload, list):
        raise ParseError(f"expected a JSON array, got {type(payload).__name__}")

    records: List[SdrRecord] = []
    skipped: List[ValidationError] = []
    for i, row in enumerate(payload):
        try:
            records.append(SdrRecord.from_api(row, i))
        except ValidationError as e:
            skipped.append(e)
    return records, skipped


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------

@dataclass
class FetchResult:
    records: List[SdrRecord] = field(default_factory=list)
    error: Optional[FetchError] = None
    skipped: List[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def fetch_call_report(
    url: str = CALL_REPORT_URL,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> FetchResult:
    """GET the report once and validate it.

    Never raises for fetch-stage failures: a NetworkError or ParseError comes
    back in FetchResult.error instead.
    """
    session = session or requests.Session()
    try:
        resp = session.get(url, headers={"Accept": "application/json"}, timeout=timeout)
    except requests.RequestException as e:
        return FetchResult(error=NetworkError(detail=str(e)))

    # Response.ok is true for any status below 400; only 2xx counts here
    if not 200 <= resp.status_code < 300:
        return FetchResult(error=NetworkError(resp.status_code))

    try:
        payload = resp.json()
    except ValueError as e:
        return FetchResult(error=ParseError(f"response is not valid JSON ({e})"))

    try:
        records, skipped = parse_records(payload)
    except ParseError as e:
        return FetchResult(error=e)
    return FetchResult(records=records, skipped=skipped)
