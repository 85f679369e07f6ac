"""Direct point-to-point transport: newline-delimited JSON over TCP.

One request per line, ``{"cmd": str, "data": object, "id"?: str}``; one
reply per line, the dispatcher's envelope with the request ``id`` echoed
back.  Each client connection is served on its own thread.
"""

from __future__ import annotations

import json
import socketserver
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from shared.domain.rpc import reply_error

logger = structlog.get_logger(__name__)

Dispatcher = Callable[[Any, Any], Dict[str, Any]]


class JsonLineHandler(socketserver.StreamRequestHandler):
    """Reads JSON lines until the client closes the connection."""

    server: "JsonLineServer"

    def handle(self) -> None:
        peer = "%s:%s" % self.client_address[:2]
        logger.info("tcp.client_connected", peer=peer)
        for raw in self.rfile:
            if not raw.strip():
                continue
            reply = self.server.process_line(raw)
            self.wfile.write(json.dumps(reply).encode("utf-8") + b"\n")
            self.wfile.flush()
        logger.info("tcp.client_disconnected", peer=peer)

    def finish(self) -> None:
        try:
            super().finish()
        finally:
            if self.server.on_disconnect is not None:
                self.server.on_disconnect()


class JsonLineServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(
        self,
        address: Tuple[str, int],
        dispatcher: Dispatcher,
        on_request: Optional[Callable[[Optional[str], Any], None]] = None,
        on_disconnect: Optional[Callable[[], None]] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.on_request = on_request
        self.on_disconnect = on_disconnect
        super().__init__(address, JsonLineHandler)

    def process_line(self, raw: bytes) -> Dict[str, Any]:
        """Decode one frame, dispatch it and return the reply to send."""
        try:
            message = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("tcp.bad_frame", error=str(exc))
            return reply_error(400, "bad_request", "Frame is not valid JSON.")

        if not isinstance(message, dict) or not isinstance(message.get("cmd"), str):
            return reply_error(
                400, "bad_request", "Frame must be an object with a string 'cmd'."
            )

        request_id = message.get("id")
        if self.on_request is not None:
            self.on_request(request_id, message["cmd"])

        reply = self.dispatcher(message["cmd"], message.get("data"))
        if request_id is not None:
            reply = {**reply, "id": request_id}
        return reply
