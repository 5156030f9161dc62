"""Point-to-point numeric link over UDP.

Datagrams are JSON objects ``{"type": ..., "data": ..., "timestamp": ...}``
where ``timestamp`` is epoch milliseconds. ``type == "number"`` carries
``{"value": <int>}``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

from elangdf._constants import DEFAULT_UDP_PORT, UDP_MAX_NUMBER

_logger = logging.getLogger(__name__)

LOCALHOST = "127.0.0.1"


def _now_ms() -> int:
    return int(time.time() * 1000)


def encode_number(number: int) -> bytes:
    message = {"type": "number", "data": {"value": number}, "timestamp": _now_ms()}
    return json.dumps(message, separators=(",", ":")).encode("utf-8")


def decode_message(payload: bytes) -> dict[str, Any] | None:
    """Decode one datagram; ``None`` for anything that is not a message object."""
    try:
        message = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        return None
    return message


class _NumberProtocol(asyncio.DatagramProtocol):
    def __init__(self, link: UdpNumberLink) -> None:
        self._link = link

    def datagram_received(self, data: bytes, addr: tuple[str | Any, int]) -> None:
        message = decode_message(data)
        if message is None:
            _logger.debug("Ignoring malformed datagram from %s", addr)
            return
        self._link._on_message(message)

    def error_received(self, exc: Exception) -> None:
        _logger.warning("UDP receive error: %s", exc)


class UdpNumberLink:
    """Listen for and send numeric messages on the loopback interface."""

    def __init__(self, host: str = LOCALHOST) -> None:
        self._host = host
        self._transport: asyncio.DatagramTransport | None = None
        self._port: int | None = None
        self.current_number: int | None = 0
        self.current_message: dict[str, Any] | None = None

    @property
    def is_listening(self) -> bool:
        return self._transport is not None

    @property
    def port(self) -> int | None:
        return self._port

    async def start_listening(self, port: int = DEFAULT_UDP_PORT) -> str:
        if self._transport is not None:
            return f"Already listening on port {self._port}"

        loop = asyncio.get_running_loop()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _NumberProtocol(self),
                local_addr=(self._host, port),
            )
        except OSError as exc:
            raise ConnectionError(f"Failed to bind: {exc}") from exc

        self._transport = transport
        self._port = transport.get_extra_info("sockname")[1]
        _logger.info("UDP link listening on %s:%d", self._host, self._port)
        return f"Listening on port {self._port}"

    async def stop_listening(self) -> str:
        transport = self._transport
        if transport is None:
            return "Not listening"
        self._transport = None
        self._port = None
        transport.close()
        self.current_number = None
        self.current_message = None
        _logger.info("UDP link stopped")
        return "Stopped listening"

    async def send_number(self, number: int, port: int = DEFAULT_UDP_PORT) -> str:
        if not 0 <= number <= UDP_MAX_NUMBER:
            raise ValueError(f"Number must be between 0-{UDP_MAX_NUMBER}")

        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            asyncio.DatagramProtocol,
            remote_addr=(self._host, port),
        )
        try:
            transport.sendto(encode_number(number))
        finally:
            transport.close()
        return f"Sent {number}"

    def _on_message(self, message: dict[str, Any]) -> None:
        self.current_message = message
        if message.get("type") == "number":
            data = message.get("data")
            value = data.get("value") if isinstance(data, dict) else None
            if isinstance(value, int) and not isinstance(value, bool):
                self.current_number = value
