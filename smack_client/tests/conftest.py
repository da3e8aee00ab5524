import os
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from smack_client.host import ViewSnapshot


def pytest_runtest_setup(item):
    if item.get_closest_marker("pyqt_required"):
        if not os.getenv("PYQT_TESTS"):
            pytest.skip("PYQT_TESTS not set; skipping PyQt-dependent test")


class FakeHost:
    """Records everything the core asks of the editor."""

    def __init__(self, *, undo_depth: int = 100, view: Optional[ViewSnapshot] = None) -> None:
        self.undo_depth = undo_depth
        self.undo_calls = 0
        self.view = view if view is not None else ViewSnapshot(topline=10, lnum=14, col=3, curswant=3)
        self.restored: List[ViewSnapshot] = []
        self.notifications: List[Tuple[str, int]] = []
        self.scheduled: List[Callable[[], None]] = []
        self.timers: Dict[str, Tuple[int, Callable[[], None]]] = {}
        self.stopped_timers: List[str] = []
        self.commands: Dict[str, Callable[[], None]] = {}
        self.startup_hooks: List[Callable[[], None]] = []
        self.shutdown_hooks: List[Callable[[], None]] = []
        self._timer_seq = 0

    def undo(self) -> bool:
        self.undo_calls += 1
        if self.undo_depth <= 0:
            return False
        self.undo_depth -= 1
        return True

    def save_view(self) -> Optional[ViewSnapshot]:
        return self.view

    def restore_view(self, view: ViewSnapshot) -> None:
        self.restored.append(view)

    def notify(self, message: str, level: int) -> None:
        self.notifications.append((message, level))

    def schedule(self, callback: Callable[[], None]) -> None:
        self.scheduled.append(callback)

    def drain(self) -> None:
        while self.scheduled:
            self.scheduled.pop(0)()

    def start_timer(self, interval_ms: int, callback: Callable[[], None]) -> str:
        self._timer_seq += 1
        handle = f"t{self._timer_seq}"
        self.timers[handle] = (interval_ms, callback)
        return handle

    def stop_timer(self, handle: object) -> None:
        self.stopped_timers.append(handle)  # type: ignore[arg-type]
        self.timers.pop(handle, None)  # type: ignore[arg-type]

    def tick(self, handle: str) -> None:
        _interval, callback = self.timers[handle]
        callback()

    def run_timer(self, handle: str) -> int:
        ticks = 0
        while handle in self.timers:
            self.tick(handle)
            ticks += 1
        return ticks

    def register_command(self, name: str, callback: Callable[[], None]) -> None:
        self.commands[name] = callback

    def on_startup(self, callback: Callable[[], None]) -> None:
        self.startup_hooks.append(callback)

    def on_shutdown(self, callback: Callable[[], None]) -> None:
        self.shutdown_hooks.append(callback)


class FakeSignal:
    def __init__(self) -> None:
        self._slots: List[Callable[..., None]] = []

    def connect(self, slot: Callable[..., None]) -> None:
        self._slots.append(slot)

    def emit(self, *args) -> None:
        for slot in list(self._slots):
            slot(*args)


class FakeSocket:
    """Mimics the QLocalSocket surface the connection manager uses."""

    def __init__(self) -> None:
        self.connected = FakeSignal()
        self.disconnected = FakeSignal()
        self.readyRead = FakeSignal()
        self.errorOccurred = FakeSignal()
        self.server_names: List[str] = []
        self.aborted = 0
        self.deleted = False
        self._data = bytearray()

    def connectToServer(self, name: str) -> None:
        self.server_names.append(name)

    def readAll(self) -> bytes:
        data = bytes(self._data)
        self._data.clear()
        return data

    def push(self, data: bytes) -> None:
        self._data.extend(data)
        self.readyRead.emit()

    def abort(self) -> None:
        self.aborted += 1
        # QLocalSocket emits disconnected synchronously from abort().
        self.disconnected.emit()

    def deleteLater(self) -> None:
        self.deleted = True

    def errorString(self) -> str:
        return "fake socket error"


class FakeSocketFactory:
    def __init__(self) -> None:
        self.sockets: List[FakeSocket] = []

    def __call__(self) -> FakeSocket:
        sock = FakeSocket()
        self.sockets.append(sock)
        return sock

    @property
    def last(self) -> FakeSocket:
        return self.sockets[-1]


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def socket_factory() -> FakeSocketFactory:
    return FakeSocketFactory()
