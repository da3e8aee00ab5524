"""Editor-facing entry points: setup, start/stop/toggle and lifecycle hooks."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from smack_client.config import DEFAULT_CONFIG, SmackConfig, merge_options
from smack_client.connection import ConnectionManager, SocketFactory
from smack_client.dispatcher import HitDispatcher
from smack_client.host import EditorHost
from smack_client.shake import ScreenShaker

PLUGIN_NAME = "smack"
COMMAND_START = "SmackStart"
COMMAND_STOP = "SmackStop"
COMMAND_TOGGLE = "SmackToggle"

LOGGER = logging.getLogger("Smack.Client")


class SmackPlugin:
    """Wires config, connection, dispatcher and shaker for one editor."""

    def __init__(
        self,
        host: EditorHost,
        config: SmackConfig = DEFAULT_CONFIG,
        *,
        socket_factory: Optional[SocketFactory] = None,
    ) -> None:
        self.host = host
        self.config = config
        self.shaker = ScreenShaker(host)
        self.dispatcher = HitDispatcher(host, self._current_config, self.shaker)
        kwargs = {} if socket_factory is None else {"socket_factory": socket_factory}
        self.connection = ConnectionManager(host, self._current_config, self.dispatcher.submit, **kwargs)
        self._commands_registered = False
        self._startup_hooked = False
        self._shutdown_hooked = False

    def _current_config(self) -> SmackConfig:
        return self.config

    def setup(self, options: Optional[Mapping[str, Any]] = None) -> SmackConfig:
        """Replace the configuration and install commands and hooks once.

        Options merge over the defaults, not over a previous setup. An open
        connection is left as it is.
        """
        self.config = merge_options(options)
        LOGGER.debug("Configuration applied: %s", self.config.as_dict())
        if not self._commands_registered:
            self.host.register_command(COMMAND_START, self.start)
            self.host.register_command(COMMAND_STOP, self.stop)
            self.host.register_command(COMMAND_TOGGLE, self.toggle)
            self._commands_registered = True
        if self.config.enabled and not self._startup_hooked:
            self.host.on_startup(self.start)
            self._startup_hooked = True
        if not self._shutdown_hooked:
            self.host.on_shutdown(self.shutdown)
            self._shutdown_hooked = True
        return self.config

    def start(self) -> None:
        self.connection.connect()

    def stop(self) -> None:
        self.connection.disconnect()

    def toggle(self) -> None:
        if self.connection.is_active:
            self.stop()
        else:
            self.start()

    def shutdown(self) -> None:
        self.stop()
        self.shaker.cancel_all()


_plugin: Optional[SmackPlugin] = None


def setup(
    host: EditorHost,
    options: Optional[Mapping[str, Any]] = None,
    *,
    socket_factory: Optional[SocketFactory] = None,
) -> SmackPlugin:
    """Create (or reconfigure) the module-level plugin instance for ``host``."""
    global _plugin
    if _plugin is None or _plugin.host is not host:
        if _plugin is not None:
            _plugin.shutdown()
        _plugin = SmackPlugin(host, socket_factory=socket_factory)
    _plugin.setup(options)
    return _plugin


def start() -> None:
    if _plugin is not None:
        _plugin.start()


def stop() -> None:
    if _plugin is not None:
        _plugin.stop()


def toggle() -> None:
    if _plugin is not None:
        _plugin.toggle()


def teardown() -> None:
    global _plugin
    plugin = _plugin
    _plugin = None
    if plugin is not None:
        plugin.shutdown()
