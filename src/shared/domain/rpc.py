"""Reply envelope shared by the message transports.

Every command answered over the broker or the direct listener produces one
``RpcReply``: ``{"ok": true, "data": ...}`` on success or
``{"ok": false, "error": {"status", "code", "message"}}`` on failure.
Status values follow HTTP semantics so callers can reuse one mapping.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class RpcError(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: int
    code: str
    message: Union[str, List[str]]


class RpcReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool
    data: Any = None
    error: Optional[RpcError] = None

    def to_wire(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": self.error.model_dump()}


def reply_ok(data: Any) -> Dict[str, Any]:
    return RpcReply(ok=True, data=data).to_wire()


def reply_error(status: int, code: str, message: Union[str, List[str]]) -> Dict[str, Any]:
    return RpcReply(
        ok=False, error=RpcError(status=status, code=code, message=message)
    ).to_wire()


class UnknownCommand(Exception):
    """No handler is registered for the requested command name."""

    def __init__(self, cmd: Any) -> None:
        self.cmd = cmd
        super().__init__(f"Unknown command: {cmd!r}")
