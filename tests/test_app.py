import time

import pytest

import app as app_module


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "TRACE_PATH", str(tmp_path / "trace.json"))
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def wait_for_trace(client, timeout=30.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        body = client.get("/trace").get_json()
        if body["ready"]:
            return body["events"]
        time.sleep(0.05)
    pytest.fail("solver never finished")


def test_trace_empty_before_solving(client):
    assert client.get("/trace").get_json() == {"ready": False, "events": []}


def test_solve_and_poll(client):
    resp = client.post("/solve", json={"lhs": ["SEND", "MORE"], "rhs": ["MONEY"]})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "started"

    events = wait_for_trace(client)
    end = [e for e in events if e["type"] == "END"][0]
    assert end["result"]["M"] == 1
    assert end["total"] == 10652


def test_legacy_payload(client):
    resp = client.post("/solve", json={"words": ["AA"], "result": "BB"})
    assert resp.get_json()["rhs"] == ["BB"]
    events = wait_for_trace(client)
    assert events[-2]["result"] is None
    assert events[-2]["reason"] == "no solution found"


def test_bad_words_are_rejected(client):
    resp = client.post("/solve", json={"lhs": ["SEND"], "rhs": []})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "right-hand side has no words"


def test_clear(client):
    client.post("/solve", json={"lhs": ["TO", "GO"], "rhs": ["OUT"]})
    wait_for_trace(client)
    assert client.post("/clear").get_json() == {"cleared": True}
    assert client.get("/trace").get_json()["events"] == []


@pytest.mark.parametrize(
    "body, error",
    [
        (["SEND"], "request body must be a JSON object"),
        ({"lhs": "AB", "rhs": ["C"]}, "left-hand side must be a list of words, got str"),
        ({"lhs": ["A", "B"], "rhs": "C"}, "right-hand side must be a list of words, got str"),
        ({"words": ["A"], "result": ["B"]}, "result must be a single word"),
    ],
)
def test_malformed_body_is_rejected(client, body, error):
    resp = client.post("/solve", json=body)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == error
    assert client.get("/trace").get_json() == {"ready": False, "events": []}


@pytest.mark.parametrize("raw, expected", [(None, None), ("", None), ("250", 250), ("-1", None), ("fast", None)])
def test_timeout_from_env(raw, expected):
    assert app_module.timeout_from_env(raw) == expected
