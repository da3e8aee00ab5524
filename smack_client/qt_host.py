"""EditorHost implementation backed by a Qt plain-text editor."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Set

from PyQt6.QtCore import QCoreApplication, QObject, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QTextCursor
from PyQt6.QtWidgets import QPlainTextEdit, QStatusBar

from smack_client.host import ViewSnapshot

STATUS_MESSAGE_MS = 4000

_LOGGER = logging.getLogger("Smack.Client.QtHost")


class QtEditorHost(QObject):
    """Drives a QPlainTextEdit on the Qt event loop."""

    notification = pyqtSignal(str, int)

    def __init__(self, editor: QPlainTextEdit, status_bar: Optional[QStatusBar] = None) -> None:
        super().__init__(editor)
        self._editor = editor
        self._status_bar = status_bar
        self._timers: Set[QTimer] = set()
        self._commands: Dict[str, QAction] = {}
        self._shutdown_callbacks: List[Callable[[], None]] = []
        self._shutdown_ran = False
        self._quit_hooked = False

    @property
    def editor(self) -> QPlainTextEdit:
        return self._editor

    @property
    def commands(self) -> Dict[str, QAction]:
        return dict(self._commands)

    # Editing --------------------------------------------------------------

    def undo(self) -> bool:
        try:
            if not self._editor.document().isUndoAvailable():
                return False
            self._editor.undo()
        except RuntimeError:
            return False
        return True

    def save_view(self) -> Optional[ViewSnapshot]:
        try:
            cursor = self._editor.textCursor()
            topline = self._editor.verticalScrollBar().value() + 1
            col = cursor.positionInBlock()
            return ViewSnapshot(topline=topline, lnum=cursor.blockNumber() + 1, col=col, curswant=col)
        except RuntimeError:
            return None

    def restore_view(self, view: ViewSnapshot) -> None:
        try:
            document = self._editor.document()
            block = document.findBlockByNumber(max(0, view.lnum - 1))
            if not block.isValid():
                block = document.lastBlock()
            column = max(0, min(view.col, block.length() - 1))
            cursor = QTextCursor(block)
            cursor.setPosition(block.position() + column)
            self._editor.setTextCursor(cursor)
            scrollbar = self._editor.verticalScrollBar()
            scrollbar.setValue(max(scrollbar.minimum(), min(view.topline - 1, scrollbar.maximum())))
        except RuntimeError as exc:
            _LOGGER.debug("restore_view skipped: %s", exc)

    # Loop primitives ------------------------------------------------------

    def notify(self, message: str, level: int) -> None:
        _LOGGER.log(level, "notify: %s", message)
        self.notification.emit(message, level)
        if self._status_bar is not None:
            try:
                self._status_bar.showMessage(message, STATUS_MESSAGE_MS)
            except RuntimeError:
                pass

    def schedule(self, callback: Callable[[], None]) -> None:
        QTimer.singleShot(0, callback)

    def start_timer(self, interval_ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self)
        timer.setInterval(int(interval_ms))
        timer.timeout.connect(callback)
        self._timers.add(timer)
        timer.start()
        return timer

    def stop_timer(self, handle: object) -> None:
        if not isinstance(handle, QTimer):
            return
        self._timers.discard(handle)
        handle.stop()
        handle.deleteLater()

    # Commands and lifecycle -----------------------------------------------

    def register_command(self, name: str, callback: Callable[[], None]) -> None:
        existing = self._commands.pop(name, None)
        if existing is not None:
            self._editor.removeAction(existing)
        action = QAction(name, self._editor)
        action.setObjectName(name)
        action.triggered.connect(lambda _checked=False: callback())
        self._editor.addAction(action)
        self._commands[name] = action

    def run_command(self, name: str) -> bool:
        action = self._commands.get(name)
        if action is None:
            _LOGGER.warning("Unknown command %s", name)
            return False
        action.trigger()
        return True

    def on_startup(self, callback: Callable[[], None]) -> None:
        # Fires once the event loop is running.
        QTimer.singleShot(0, callback)

    def on_shutdown(self, callback: Callable[[], None]) -> None:
        self._shutdown_callbacks.append(callback)
        if self._quit_hooked:
            return
        app = QCoreApplication.instance()
        if app is not None:
            app.aboutToQuit.connect(self.shutdown)
            self._quit_hooked = True

    def shutdown(self) -> None:
        if self._shutdown_ran:
            return
        self._shutdown_ran = True
        for callback in list(self._shutdown_callbacks):
            try:
                callback()
            except Exception:
                _LOGGER.exception("Shutdown hook failed")
        for timer in list(self._timers):
            self.stop_timer(timer)
