import logging
from unittest.mock import MagicMock

import pytest

from vocab_highlighter.core import BroadcastFailure
from vocab_highlighter.services import FAVORITES_CHANGED, PageEndpoint


@pytest.fixture
def listening_endpoint():
    endpoint = PageEndpoint("listening")
    received = []
    endpoint.listen(received.append)
    return endpoint, received


def test_broadcast_reaches_every_listening_page(notifier):
    pages = []
    for name in ("a", "b", "c"):
        endpoint = PageEndpoint(name)
        received = []
        endpoint.listen(received.append)
        notifier.register(endpoint)
        pages.append(received)

    delivered = notifier.notify_favorites_changed()

    assert delivered == 3
    for received in pages:
        assert received == [{"action": FAVORITES_CHANGED}]


def test_page_without_listener_is_skipped(notifier, listening_endpoint, caplog):
    endpoint, received = listening_endpoint
    deaf = PageEndpoint("deaf")
    notifier.register(deaf)
    notifier.register(endpoint)

    with caplog.at_level(logging.WARNING):
        delivered = notifier.notify_favorites_changed()

    assert delivered == 1
    assert received == [{"action": FAVORITES_CHANGED}]
    assert "deaf" in caplog.text


def test_closed_page_is_skipped(notifier, listening_endpoint):
    endpoint, received = listening_endpoint
    notifier.register(endpoint)
    endpoint.close()

    assert notifier.notify_favorites_changed() == 0
    assert received == []


def test_closed_endpoint_post_raises():
    endpoint = PageEndpoint("gone")
    endpoint.listen(lambda message: None)
    endpoint.close()
    with pytest.raises(BroadcastFailure):
        endpoint.post({"action": FAVORITES_CHANGED})


def test_dead_endpoint_is_dropped(notifier, listening_endpoint):
    endpoint, received = listening_endpoint
    dead = MagicMock()
    dead.post.side_effect = RuntimeError("Internal C++ object already deleted.")
    notifier.register(dead)
    notifier.register(endpoint)

    assert notifier.notify_favorites_changed() == 1
    assert notifier.endpoint_count == 1
    assert received == [{"action": FAVORITES_CHANGED}]


def test_register_is_idempotent(notifier, listening_endpoint):
    endpoint, received = listening_endpoint
    notifier.register(endpoint)
    notifier.register(endpoint)

    notifier.notify_favorites_changed()

    assert notifier.endpoint_count == 1
    assert len(received) == 1


def test_unregistered_page_gets_nothing(notifier, listening_endpoint):
    endpoint, received = listening_endpoint
    notifier.register(endpoint)
    notifier.unregister(endpoint)

    assert notifier.notify_favorites_changed() == 0
    assert received == []


def test_message_is_copied_per_page(notifier):
    first = PageEndpoint("first")
    second = PageEndpoint("second")
    seen = []

    def mutate(message):
        message["tampered"] = True
        seen.append(message)

    first.listen(mutate)
    second.listen(seen.append)
    notifier.register(first)
    notifier.register(second)

    notifier.broadcast({"action": FAVORITES_CHANGED})

    assert "tampered" not in seen[1]
