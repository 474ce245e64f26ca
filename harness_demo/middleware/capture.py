# ================================
# FILE: harness_demo/middleware/capture.py
# ================================

from typing import Optional

from starlette.types import Message, Send


class ResponseCapture:
    """Pass-through wrapper around an ASGI ``send`` that records status and body size.

    A body written before any status was started counts as an implicit 200.
    """

    def __init__(self, send: Send):
        self._send = send
        self.status: Optional[int] = None
        self.size = 0

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
        elif message["type"] == "http.response.body":
            if self.status is None:
                self.status = 200
            self.size += len(message.get("body", b""))
        await self._send(message)
