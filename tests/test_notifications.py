import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from shopcart.notifications import NotificationQueue


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_notifications_expire_after_ttl():
    clock = FakeClock()
    queue = NotificationQueue(ttl=3, clock=clock)
    first = queue.add("Товар добавлен в корзину")
    clock.now += 2
    queue.add("Ошибка", "error")

    assert queue.count == 2
    clock.now += 1.5
    assert [n.message for n in queue.active()] == ["Ошибка"]
    assert first not in queue.items


def test_zero_ttl_keeps_messages():
    clock = FakeClock()
    queue = NotificationQueue(ttl=0, clock=clock)
    queue.add("a")
    clock.now += 10 ** 6
    assert queue.count == 1


def test_remove_and_clear():
    queue = NotificationQueue(ttl=0)
    a = queue.add("a")
    b = queue.add("b", "warning")
    assert a.id != b.id

    queue.remove(a.id)
    assert queue.active() == (b,)
    queue.clear()
    assert queue.count == 0


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        NotificationQueue().add("x", "info")
