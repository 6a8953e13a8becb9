import time

import pytest
from fastapi.testclient import TestClient

from studium.main import create_app
from conftest import decode_image

ANALYZE = "http://collab.test/analyze"
EQUATIONS = "http://collab.test/equations"
GRAPH = "http://collab.test/graph"

STROKE = [
    {"kind": "down", "x": 10, "y": 10},
    {"kind": "move", "x": 20, "y": 20},
    {"kind": "up"},
]


@pytest.fixture
def client(context, http):
    return TestClient(create_app(context, http=http))


def _open(client, width=120, height=80):
    res = client.post("/api/v1/canvas/sessions", json={"width": width, "height": height})
    assert res.status_code == 200
    return res.json()["session_id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_draw_scenario(client):
    sid = _open(client)
    res = client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})
    assert res.json() == {"stroke_count": 1, "drawing": False}

    body = client.get(f"/api/v1/canvas/sessions/{sid}").json()
    stroke = body["strokes"][0]
    assert [(p["x"], p["y"]) for p in stroke["points"]] == [(10, 10), (20, 20)]
    assert stroke["color"] == "#ef4444"
    assert stroke["width"] == 3
    assert body["can_transfer"] is True


def test_snapshot_requires_strokes(client):
    sid = _open(client)
    assert client.get(f"/api/v1/canvas/sessions/{sid}/snapshot").status_code == 409

    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})
    res = client.get(f"/api/v1/canvas/sessions/{sid}/snapshot")
    assert res.status_code == 200
    assert decode_image(res.json()["imageData"]).size == (120, 80)


def test_snapshot_unsized_surface(client):
    sid = _open(client, width=0, height=0)
    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})
    assert client.get(f"/api/v1/canvas/sessions/{sid}/snapshot").status_code == 503

    client.put(f"/api/v1/canvas/sessions/{sid}/size", json={"width": 40, "height": 40})
    assert client.get(f"/api/v1/canvas/sessions/{sid}/snapshot").status_code == 200


def test_transfer_equations_in_foreground(client, http):
    http.reply(EQUATIONS, payload={"success": True, "equations": "x^2+y^2=1\n\nsin(x)"})
    sid = _open(client)
    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})

    res = client.post(f"/api/v1/canvas/sessions/{sid}/transfer", json={"destination": "equations", "background": False})
    assert res.status_code == 200
    assert res.json()["result"]["ok"] is True

    body = client.get("/api/v1/equations").json()
    assert body == {"equations": ["x^2+y^2=1", "sin(x)"], "active_tab": "equations"}


def test_transfer_in_background_can_be_polled(client, http):
    http.reply(ANALYZE, payload={"success": True, "analysis": "Pythagoras."})
    sid = _open(client)
    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})

    res = client.post(f"/api/v1/canvas/sessions/{sid}/transfer", json={"destination": "analysis"})
    body = res.json()
    assert body["status"] == "sending"

    deadline = time.time() + 5
    record = client.get(body["result_url"]).json()
    while record["state"] in ("idle", "sending") and time.time() < deadline:
        time.sleep(0.01)
        record = client.get(body["result_url"]).json()

    assert record["state"] == "succeeded"
    messages = client.get("/api/v1/chat").json()["messages"]
    assert messages[-1]["content"].endswith("Pythagoras.")


def test_transfer_failure_surfaces_notification(client, http):
    http.reply(EQUATIONS, status_code=500, payload={"error": "down"})
    sid = _open(client)
    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})

    res = client.post(f"/api/v1/canvas/sessions/{sid}/transfer", json={"destination": "equations", "background": False})
    assert res.status_code == 200
    assert res.json()["result"] == {"ok": False, "reason": "HTTP 500"}

    notes = client.get("/api/v1/notifications").json()["notifications"]
    assert [n["kind"] for n in notes] == ["error"]
    assert client.delete(f"/api/v1/notifications/{notes[0]['id']}").status_code == 200
    assert client.get("/api/v1/notifications").json()["notifications"] == []


def test_clear_then_transfer_is_rejected(client, http):
    sid = _open(client)
    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})
    client.delete(f"/api/v1/canvas/sessions/{sid}/strokes")

    res = client.post(f"/api/v1/canvas/sessions/{sid}/transfer", json={"destination": "analysis"})
    assert res.status_code == 409
    assert http.calls == []


def test_tool_update_and_validation(client):
    sid = _open(client)
    res = client.put(f"/api/v1/canvas/sessions/{sid}/tool", json={"color": "#22c55e", "width": 5})
    assert res.json() == {"color": "#22c55e", "width": 5.0}

    assert client.put(f"/api/v1/canvas/sessions/{sid}/tool", json={"color": "nope"}).status_code == 422


def test_graph_from_extracted_equation(client, http):
    http.reply(EQUATIONS, payload={"success": True, "equations": "y = x^2"})
    http.reply(GRAPH, payload={"success": True, "geogebraEquation": "x^2"})
    sid = _open(client)
    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})
    client.post(f"/api/v1/canvas/sessions/{sid}/transfer", json={"destination": "equations", "background": False})

    res = client.post("/api/v1/equations/0/graph")
    assert res.json()["result"]["ok"] is True
    assert client.get("/api/v1/graphs").json()["graphs"] == [{"equation": "y = x^2", "graph_equation": "x^2"}]
    assert client.post("/api/v1/equations/5/graph").status_code == 404


def test_unknown_ids(client):
    assert client.get("/api/v1/canvas/sessions/missing").status_code == 404
    assert client.get("/api/v1/transfers/missing").status_code == 404
    assert client.delete("/api/v1/notifications/999").status_code == 404


def test_closed_session_is_gone(client):
    sid = _open(client)
    assert client.delete(f"/api/v1/canvas/sessions/{sid}").status_code == 200
    assert client.get(f"/api/v1/canvas/sessions/{sid}").status_code == 404
    assert client.delete(f"/api/v1/canvas/sessions/{sid}").status_code == 404


def test_bad_destination(client):
    sid = _open(client)
    res = client.post(f"/api/v1/canvas/sessions/{sid}/transfer", json={"destination": "flashcards"})
    assert res.status_code == 422


def test_non_finite_event_is_rejected_and_session_survives(client):
    sid = _open(client)
    raw = '{"events": [{"kind": "down", "x": 5, "y": 5}, {"kind": "move", "x": NaN, "y": 5}]}'
    res = client.post(
        f"/api/v1/canvas/sessions/{sid}/events",
        content=raw,
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 422

    client.post(f"/api/v1/canvas/sessions/{sid}/events", json={"events": STROKE})
    res = client.get(f"/api/v1/canvas/sessions/{sid}")
    assert res.status_code == 200
    assert len(res.json()["strokes"]) == 1
