from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QApplication, QMainWindow, QPlainTextEdit

from smack_client import plugin
from smack_client.config import DEFAULT_CONFIG, load_config_file, resolve_socket_path
from smack_client.errors import ConfigError
from smack_client.logging_utils import LOGGER_NAME, configure_client_logger
from smack_client.qt_host import QtEditorHost

CONFIG_ENV_VAR = "SMACK_CONFIG"

_LOGGER = logging.getLogger(LOGGER_NAME)


def resolve_config_file(args_config: Optional[str]) -> Optional[Path]:
    if args_config:
        return Path(args_config).expanduser().resolve()
    env_override = os.getenv(CONFIG_ENV_VAR)
    if env_override:
        return Path(env_override).expanduser().resolve()
    return None


def build_window(path: Optional[Path]) -> tuple[QMainWindow, QPlainTextEdit]:
    window = QMainWindow()
    editor = QPlainTextEdit(window)
    editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
    if path is not None and path.is_file():
        editor.setPlainText(path.read_text(encoding="utf-8", errors="replace"))
        window.setWindowTitle(f"smack - {path.name}")
    else:
        window.setWindowTitle("smack")
    window.setCentralWidget(editor)
    window.resize(900, 600)
    return window, editor


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Plain-text editor wired to the smack impact daemon")
    parser.add_argument("file", nargs="?", help="File to open in the editor")
    parser.add_argument("--socket", help="Path to the smack daemon socket")
    parser.add_argument("--config", help="JSON file with smack options")
    parser.add_argument("--no-shake", action="store_true", help="Disable the screen shake")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_client_logger(debug_enabled=True if args.debug else None)

    config_path = resolve_config_file(args.config)
    try:
        config = load_config_file(config_path) if config_path is not None else DEFAULT_CONFIG
    except ConfigError as exc:
        parser.error(f"invalid config {config_path}: {exc}")
    options = config.as_dict()
    options["socket_path"] = resolve_socket_path(args.socket, config)
    if args.no_shake:
        options["shake"] = False

    app = QApplication(sys.argv[:1])
    window, editor = build_window(Path(args.file).expanduser() if args.file else None)
    host = QtEditorHost(editor, window.statusBar())
    smack = plugin.setup(host, options)

    menu = window.menuBar().addMenu("&Smack")
    for action in host.commands.values():
        menu.addAction(action)

    _LOGGER.info("Starting smack editor (pid=%s, socket=%s)", os.getpid(), smack.config.socket_path)
    window.show()
    exit_code = app.exec()
    plugin.teardown()
    _LOGGER.info("smack editor exiting with code %s", exit_code)
    return int(exit_code)
