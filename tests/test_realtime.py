"""Tests for pushing in-app notifications to open websockets."""

from __future__ import annotations

import anyio
import pytest

from app.application.use_cases.notifications import InAppDispatcher
from app.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)

pytestmark = pytest.mark.anyio


class FakeWebSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        self.sent.append(message)


async def _drain() -> None:
    for _ in range(5):
        await anyio.sleep(0)


async def test_new_in_app_record_is_pushed_to_open_websocket(session, make_alert) -> None:
    manager = NotificationConnectionManager()
    websocket = FakeWebSocket()
    await manager.connect("u1", websocket)
    dispatcher = InAppDispatcher(
        session, backoff_seconds=0, publisher=NotificationPublisher(manager)
    )
    alert = make_alert()

    result = await dispatcher.send("u1", alert)
    await dispatcher.send("u1", alert)
    await _drain()

    assert websocket.accepted is True
    assert len(websocket.sent) == 1
    frame = websocket.sent[0]
    assert frame["type"] == "notification"
    assert frame["data"]["id"] == result.record_id
    assert frame["data"]["alert_id"] == alert.id
    assert frame["data"]["module_name"] == "Computer Science Fundamentals"
    assert frame["data"]["read"] is False


async def test_other_users_sockets_receive_nothing(session, make_alert) -> None:
    manager = NotificationConnectionManager()
    websocket = FakeWebSocket()
    await manager.connect("u2", websocket)
    dispatcher = InAppDispatcher(
        session, backoff_seconds=0, publisher=NotificationPublisher(manager)
    )

    await dispatcher.send("u1", make_alert())
    await _drain()

    assert websocket.sent == []


async def test_broken_socket_is_dropped() -> None:
    class ClosedWebSocket(FakeWebSocket):
        async def send_json(self, message: dict) -> None:
            raise RuntimeError("socket closed")

    manager = NotificationConnectionManager()
    await manager.connect("u1", ClosedWebSocket())

    await manager.send_to_user("u1", {"type": "pong"})

    assert manager.is_connected("u1") is False
