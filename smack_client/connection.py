"""Local-socket client for the smack daemon's event stream."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from PyQt6.QtNetwork import QLocalSocket

from smack_client.config import SmackConfig
from smack_client.host import EditorHost
from smack_client.protocol import HitEvent, LineFramer, decode_event

MSG_CONNECTED = "smack: connected"
MSG_DISCONNECTED = "smack: disconnected"
MSG_CONNECT_FAILED = "smack: can't connect — is the service running? (sudo smack)"

_LOGGER = logging.getLogger("Smack.Client.Connection")

SocketFactory = Callable[[], Any]


class ConnectionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class Connection:
    """The single logical link to the daemon and its receive buffer."""

    state: ConnectionState = ConnectionState.DISCONNECTED
    socket: Optional[Any] = None
    framer: LineFramer = field(default_factory=LineFramer)


class ConnectionManager:
    """Owns connect/teardown of the daemon socket and feeds decoded events onward.

    All socket signals arrive on the editor's event loop. Signals from a socket
    that has already been released are ignored, so teardown may run from inside
    any socket callback.
    """

    def __init__(
        self,
        host: EditorHost,
        config_provider: Callable[[], SmackConfig],
        on_event: Callable[[HitEvent], None],
        *,
        socket_factory: SocketFactory = QLocalSocket,
    ) -> None:
        self._host = host
        self._config = config_provider
        self._on_event = on_event
        self._socket_factory = socket_factory
        self._connection = Connection()

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    @property
    def is_connected(self) -> bool:
        return self._connection.state is ConnectionState.CONNECTED

    @property
    def is_active(self) -> bool:
        return self._connection.state is not ConnectionState.DISCONNECTED

    def connect(self) -> None:
        conn = self._connection
        if conn.state is not ConnectionState.DISCONNECTED:
            _LOGGER.debug("connect() ignored; state=%s", conn.state.value)
            return
        path = self._config().socket_path
        conn.state = ConnectionState.CONNECTING
        conn.framer.reset()
        sock = self._socket_factory()
        conn.socket = sock
        sock.connected.connect(lambda: self._handle_connected(sock))
        sock.readyRead.connect(lambda: self._handle_ready_read(sock))
        sock.errorOccurred.connect(lambda error: self._handle_error(sock, error))
        sock.disconnected.connect(lambda: self._handle_disconnected(sock))
        _LOGGER.debug("Connecting to %s", path)
        sock.connectToServer(path)

    def disconnect(self) -> None:
        if self._connection.state is ConnectionState.DISCONNECTED:
            return
        self._release()
        self._notify(MSG_DISCONNECTED, logging.INFO)

    # Socket callbacks -----------------------------------------------------

    def _is_current(self, sock: Any) -> bool:
        return sock is not None and sock is self._connection.socket

    def _handle_connected(self, sock: Any) -> None:
        if not self._is_current(sock):
            return
        conn = self._connection
        conn.state = ConnectionState.CONNECTED
        conn.framer.reset()
        self._notify(MSG_CONNECTED, logging.INFO)

    def _handle_ready_read(self, sock: Any) -> None:
        if not self._is_current(sock):
            return
        data = bytes(sock.readAll())
        if not data:
            return
        for line in self._connection.framer.feed(data):
            if not self._is_current(sock):
                return
            event = decode_event(line)
            if event is None:
                continue
            try:
                self._on_event(event)
            except Exception:
                _LOGGER.exception("Hit handler failed for %s", event)

    def _handle_error(self, sock: Any, error: Any) -> None:
        if not self._is_current(sock):
            return
        reason = self._error_string(sock, error)
        if self._connection.state is ConnectionState.CONNECTING:
            _LOGGER.warning("Connect to %s failed: %s", self._config().socket_path, reason)
            self._release()
            self._notify(MSG_CONNECT_FAILED, logging.ERROR)
            return
        _LOGGER.warning("Read from smack socket failed: %s", reason)
        self._release()
        self._notify(MSG_DISCONNECTED, logging.WARNING)

    def _handle_disconnected(self, sock: Any) -> None:
        if not self._is_current(sock):
            return
        _LOGGER.info("smack daemon closed the connection")
        self._release()
        self._notify(MSG_DISCONNECTED, logging.WARNING)

    # Helpers --------------------------------------------------------------

    def _release(self) -> None:
        conn = self._connection
        sock = conn.socket
        conn.socket = None
        conn.state = ConnectionState.DISCONNECTED
        conn.framer.reset()
        if sock is None:
            return
        try:
            sock.abort()
        except RuntimeError as exc:
            _LOGGER.debug("Socket abort failed: %s", exc)
        try:
            sock.deleteLater()
        except RuntimeError as exc:
            _LOGGER.debug("Socket cleanup failed: %s", exc)

    def _notify(self, message: str, level: int) -> None:
        _LOGGER.log(level, message)
        self._host.schedule(lambda: self._host.notify(message, level))

    @staticmethod
    def _error_string(sock: Any, error: Any) -> str:
        getter = getattr(sock, "errorString", None)
        if callable(getter):
            try:
                return str(getter())
            except RuntimeError:
                pass
        return str(error)
