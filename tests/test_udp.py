from __future__ import annotations

import asyncio
import json

import pytest

from elangdf.udp import UdpNumberLink, decode_message, encode_number


def test_encode_number_message_shape() -> None:
    message = json.loads(encode_number(42))

    assert message["type"] == "number"
    assert message["data"] == {"value": 42}
    assert isinstance(message["timestamp"], int)


@pytest.mark.parametrize("payload", [b"", b"\xff\xfe", b"[1, 2]", b'{"data": 1}', b"plain text"])
def test_decode_message_rejects_malformed(payload: bytes) -> None:
    assert decode_message(payload) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("number", [-1, 1_000_001])
async def test_send_number_validates_range(number: int) -> None:
    with pytest.raises(ValueError, match="between 0-1000000"):
        await UdpNumberLink().send_number(number)


@pytest.mark.asyncio
async def test_listen_receive_and_stop() -> None:
    link = UdpNumberLink()
    assert await link.stop_listening() == "Not listening"

    status = await link.start_listening(0)
    port = link.port
    assert port is not None
    assert status == f"Listening on port {port}"
    assert await link.start_listening(0) == f"Already listening on port {port}"

    sender = UdpNumberLink()
    assert await sender.send_number(1_000_000, port) == "Sent 1000000"
    for _ in range(100):
        if link.current_number == 1_000_000:
            break
        await asyncio.sleep(0.01)

    assert link.current_number == 1_000_000
    assert link.current_message is not None and link.current_message["type"] == "number"

    assert await link.stop_listening() == "Stopped listening"
    assert not link.is_listening
    assert link.current_number is None
