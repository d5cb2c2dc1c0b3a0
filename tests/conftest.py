"""Shared fixtures for store, dispatcher and page tests."""

import pytest
from PySide6.QtCore import QCoreApplication

from vocab_highlighter.io import WordStore
from vocab_highlighter.services import ChangeNotifier, RpcDispatcher, WordService


class InlineThreadPool:
    """Runs workers immediately on the calling thread."""

    def __init__(self):
        self.started = []

    def start(self, runnable):
        self.started.append(runnable)
        runnable.run()


class DeferredThreadPool:
    """Queues workers until the test decides to run them."""

    def __init__(self):
        self.queued = []

    def start(self, runnable):
        self.queued.append(runnable)

    def run_all(self, reverse=False):
        runnables, self.queued = self.queued, []
        for runnable in reversed(runnables) if reverse else runnables:
            runnable.run()


class FakeSignal:
    def __init__(self):
        self._slots = []

    def connect(self, slot):
        self._slots.append(slot)

    def emit(self, *args):
        for slot in list(self._slots):
            slot(*args)


class FakeTimer:
    """Stand-in for a single-shot QTimer that only fires when told to."""

    def __init__(self):
        self.timeout = FakeSignal()
        self.active = False
        self.interval = None
        self.single_shot = None
        self.start_count = 0

    def setSingleShot(self, single_shot):
        self.single_shot = single_shot

    def setInterval(self, msec):
        self.interval = msec

    def start(self):
        self.active = True
        self.start_count += 1

    def stop(self):
        self.active = False

    def isActive(self):
        return self.active

    def fire(self):
        """Simulate the delay elapsing; a stopped timer does nothing."""
        if self.active:
            self.active = False
            self.timeout.emit()


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """Signals between QObjects need a core application instance."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def store(tmp_path):
    word_store = WordStore(tmp_path / "words.db")
    word_store.open()
    yield word_store
    word_store.close()


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def word_service(store, notifier):
    return WordService(store, notifier)


@pytest.fixture
def inline_pool():
    return InlineThreadPool()


@pytest.fixture
def deferred_pool():
    return DeferredThreadPool()


@pytest.fixture
def dispatcher(word_service, inline_pool):
    return RpcDispatcher(word_service, thread_pool=inline_pool)


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def timer_factory():
    """Build additional fake timers when a test needs more than one."""
    return FakeTimer
