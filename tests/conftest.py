"""Shared fixtures: sample report rows and a stand-in for requests.Session."""

import json

import pytest

from call_report import SdrRecord


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        # mirrors requests.Response.ok, which is true for any status below 400
        self.ok = status_code < 400
        self._body = body
        self._text = text

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._body


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


def row(project, sdr, cph, **extra):
    data = {
        "Project": project,
        "SDR": sdr,
        "TotalCallsDialed": 120,
        "CallsAnswered": 22,
        "Connected": 0.1833,
        "Noofworkingdays": 5,
        "Noofworkinghours": 40,
        "CallsDialedDay": 24.0,
        "CallsDialedHour": cph,
    }
    data.update(extra)
    return data


@pytest.fixture
def sample_rows():
    return [
        row("A", "Priya", 5),
        row("B", "Marco", 10),
        row("A", "Jonas", 3),
    ]


@pytest.fixture
def sample_records(sample_rows):
    return [SdrRecord.from_api(r, i) for i, r in enumerate(sample_rows)]


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_row():
    return row
