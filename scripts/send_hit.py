#!/usr/bin/env python3
"""Stand in for the smack daemon: serve a Unix socket and broadcast hit events.

Examples:
    python scripts/send_hit.py hard --amplitude 2.5
    python scripts/send_hit.py --interactive
"""
from __future__ import annotations

import argparse
import json
import os
import socket
import sys
import time
from pathlib import Path
from typing import List

DEFAULT_SOCKET_PATH = "/tmp/smack.sock"
DEFAULT_UNDOS = {"light": 1, "medium": 3, "hard": 5}


def _print_step(message: str) -> None:
    print(f"[smack-cli] {message}", file=sys.stderr)


def _compose_line(severity: str, amplitude: float) -> bytes:
    payload = {
        "severity": severity,
        "amplitude": round(amplitude, 4),
        "undos": DEFAULT_UNDOS.get(severity, 1),
    }
    return (json.dumps(payload) + "\n").encode("utf-8")


def _bind(path: Path) -> socket.socket:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    server.bind(str(path))
    os.chmod(path, 0o777)
    server.listen()
    return server


def _accept(server: socket.socket, clients: List[socket.socket], wait: float) -> None:
    server.settimeout(wait)
    try:
        conn, _addr = server.accept()
    except socket.timeout:
        return
    clients.append(conn)
    _print_step(f"client connected ({len(clients)} total)")


def _broadcast(clients: List[socket.socket], line: bytes) -> None:
    for conn in list(clients):
        try:
            conn.sendall(line)
        except OSError:
            clients.remove(conn)
            _print_step("client disconnected")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Broadcast fake smack hit events to editor clients")
    parser.add_argument("severity", nargs="?", default="light", help="light, medium or hard")
    parser.add_argument("--amplitude", type=float, default=0.5)
    parser.add_argument("--socket", default=os.getenv("SMACK_SOCKET_PATH", DEFAULT_SOCKET_PATH))
    parser.add_argument("--wait", type=float, default=10.0, help="Seconds to wait for a client before sending")
    parser.add_argument("--interactive", action="store_true", help="Read '<severity> [amplitude]' lines from stdin")
    args = parser.parse_args(argv)

    path = Path(args.socket)
    server = _bind(path)
    clients: List[socket.socket] = []
    _print_step(f"socket at {path}")
    try:
        _accept(server, clients, args.wait)
        if not clients:
            _print_step("no client connected; nothing sent")
            return 1
        if not args.interactive:
            _broadcast(clients, _compose_line(args.severity, args.amplitude))
            time.sleep(0.2)
            return 0
        _print_step("type '<severity> [amplitude]', ctrl+d to quit")
        for raw in sys.stdin:
            parts = raw.split()
            if not parts:
                continue
            amplitude = float(parts[1]) if len(parts) > 1 else args.amplitude
            _accept(server, clients, 0.01)
            _broadcast(clients, _compose_line(parts[0], amplitude))
        return 0
    finally:
        for conn in clients:
            conn.close()
        server.close()
        try:
            path.unlink()
        except FileNotFoundError:
            pass


if __name__ == "__main__":
    raise SystemExit(main())
