import asyncio
import json

import pytest
import requests

from lmiamap.data_source import LoadFailure, fetch_records, is_url, load_records
from lmiamap.http import HttpClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200, headers=None, bad_json=False):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append(url)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_http_client(responses, retry_max=3):
    return HttpClient(
        timeout=1,
        retry_max=retry_max,
        backoff_base=0.0,
        backoff_max=0.0,
        session=FakeSession(responses),
    )


ROWS = [
    {"Province/Territory": "Ontario", "Program Stream": "High-wage", "Latitude": "43.6", "Longitude": "-79.4"},
    {"Province/Territory": "Yukon", "Program Stream": "Low-wage", "Latitude": 60.7, "Longitude": -135.0},
]


def test_load_records_from_file(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(ROWS), encoding="utf-8")

    records = load_records(str(path))

    assert [r.province for r in records] == ["Ontario", "Yukon"]


def test_missing_file_is_load_failure(tmp_path):
    with pytest.raises(LoadFailure):
        load_records(str(tmp_path / "nope.json"))


def test_invalid_json_is_load_failure(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LoadFailure):
        load_records(str(path))


def test_non_list_payload_is_load_failure(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"records": ROWS}), encoding="utf-8")
    with pytest.raises(LoadFailure):
        load_records(str(path))


def test_load_records_over_http():
    client = make_http_client([FakeResponse(ROWS)])

    records = load_records("https://example.org/data.json", http_client=client)

    assert len(records) == 2
    assert client.session.calls == ["https://example.org/data.json"]


def test_http_retries_transient_errors():
    client = make_http_client(
        [
            requests.ConnectionError("reset"),
            FakeResponse(status_code=503),
            FakeResponse(ROWS),
        ]
    )

    assert client.get_json("https://example.org/data.json") == ROWS
    assert len(client.session.calls) == 3


def test_http_retry_after_header_is_honoured(monkeypatch):
    slept = []
    monkeypatch.setattr("lmiamap.http.time.sleep", lambda s: slept.append(s))
    client = make_http_client([FakeResponse(status_code=429, headers={"Retry-After": "0"}), FakeResponse(ROWS)])

    assert client.get_json("https://example.org/data.json") == ROWS
    assert slept == [0.0]


def test_http_gives_up_after_retry_max():
    client = make_http_client([FakeResponse(status_code=500), FakeResponse(status_code=500)], retry_max=2)
    with pytest.raises(requests.HTTPError):
        client.get_json("https://example.org/data.json")


def test_http_not_found_is_load_failure():
    client = make_http_client([FakeResponse(status_code=404)])
    with pytest.raises(LoadFailure):
        load_records("https://example.org/data.json", http_client=client)
    assert len(client.session.calls) == 1


def test_http_non_json_is_load_failure():
    client = make_http_client([FakeResponse(bad_json=True)])
    with pytest.raises(LoadFailure):
        load_records("https://example.org/data.json", http_client=client)


def test_fetch_records_is_awaitable(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(ROWS), encoding="utf-8")

    records = asyncio.run(fetch_records(str(path)))

    assert len(records) == 2


def test_is_url():
    assert is_url("https://example.org/x.json")
    assert is_url("http://example.org/x.json")
    assert not is_url("data.json")
