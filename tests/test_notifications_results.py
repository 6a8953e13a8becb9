from studium.transfer.notifications import NotificationQueue
from studium.transfer.results import AnalysisResponse, Err, Ok, parse_equations


def test_notifications_expire_after_ttl(clock):
    queue = NotificationQueue(default_ttl=3.0, clock=clock)
    queue.push("success", "done")
    assert len(queue.active()) == 1
    clock.advance(2.9)
    assert len(queue.active()) == 1
    clock.advance(0.2)
    assert queue.active() == []


def test_sticky_notification_until_dismissed(clock):
    queue = NotificationQueue(default_ttl=3.0, clock=clock)
    item = queue.push("info", "working...", ttl=None)
    clock.advance(60)
    assert [n.id for n in queue.active()] == [item.id]
    assert queue.dismiss(item.id)
    assert queue.active() == []
    assert not queue.dismiss(item.id)


def test_notification_order_is_preserved(clock):
    queue = NotificationQueue(clock=clock)
    queue.push("info", "a")
    queue.push("error", "b")
    assert [n.message for n in queue.active()] == ["a", "b"]


def test_parse_equations_drops_blank_lines():
    assert parse_equations("x^2+y^2=1\n\nsin(x)") == ["x^2+y^2=1", "sin(x)"]


def test_parse_equations_sentinel_and_bullets():
    assert parse_equations("No equations found") == []
    assert parse_equations("- a=b\n* c=d\n   \n• e=f") == ["a=b", "c=d", "e=f"]
    assert parse_equations(None) == []


def test_tagged_results():
    ok = Ok(value=AnalysisResponse(success=True, analysis="a circle"))
    err = Err(reason="HTTP 500")
    assert ok.ok and ok.value.analysis == "a circle"
    assert not err.ok and err.reason == "HTTP 500"
