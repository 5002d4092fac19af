"""
Request - ASGI scope wrapper handed to controllers.

Exposes the parts of the request an action reads: method, path, query
string, headers and the (streamed or buffered) body.
"""

from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Mapping, Optional
from urllib.parse import parse_qs

from .faults import Fault, FaultDomain


class RequestFault(Fault):
    """Base class for faults raised while reading the request."""

    domain = FaultDomain.FLOW

    def __init__(self, code: str, message: str, **metadata):
        super().__init__(code=code, message=message, public=True, metadata=metadata)


class ClientDisconnect(RequestFault):
    """Client went away before the body was fully read."""

    def __init__(self, message: str = "Client disconnected", **metadata):
        super().__init__("CLIENT_DISCONNECT", message, **metadata)


class PayloadTooLarge(RequestFault):
    """Request body exceeds the configured maximum size."""

    status = 413

    def __init__(self, message: str = "Request body too large", **metadata):
        super().__init__("PAYLOAD_TOO_LARGE", message, **metadata)


async def _empty_receive() -> dict:
    return {"type": "http.request", "body": b"", "more_body": False}


class Request:
    """
    HTTP request backed by an ASGI scope and receive callable.

    Args:
        scope: ASGI scope dict
        receive: ASGI receive callable (an empty body when omitted)
        max_body_size: Maximum request body size in bytes
        chunk_size: Chunk size when re-streaming a buffered body
    """

    def __init__(
        self,
        scope: Mapping[str, Any],
        receive: Optional[Callable[..., Awaitable[dict]]] = None,
        *,
        max_body_size: int = 10_485_760,  # 10 MiB
        chunk_size: int = 64 * 1024,
    ):
        self.scope = scope
        self._receive = receive or _empty_receive
        self.max_body_size = max_body_size
        self.chunk_size = chunk_size

        self.state: Dict[str, Any] = {}

        self._body: Optional[bytes] = None
        self._body_consumed = False
        self._headers: Optional[Dict[str, str]] = None
        self._query_params: Optional[Dict[str, List[str]]] = None

    # ========================================================================
    # Basic Properties
    # ========================================================================

    @property
    def method(self) -> str:
        """HTTP method (GET, POST, etc.)."""
        return self.scope.get("method", "GET").upper()

    @property
    def path(self) -> str:
        """Request path (decoded)."""
        return self.scope.get("path", "/")

    @property
    def query_string(self) -> str:
        """Raw query string."""
        raw = self.scope.get("query_string", b"")
        return raw.decode("latin-1") if isinstance(raw, bytes) else raw

    @property
    def query_params(self) -> Dict[str, List[str]]:
        if self._query_params is None:
            self._query_params = parse_qs(self.query_string, keep_blank_values=True)
        return self._query_params

    def query_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        values = self.query_params.get(name)
        return values[0] if values else default

    @property
    def headers(self) -> Dict[str, str]:
        """Headers with lower-cased names; repeated headers are comma-joined."""
        if self._headers is None:
            headers: Dict[str, str] = {}
            for name, value in self.scope.get("headers", []):
                key = name.decode("latin-1").lower()
                value = value.decode("latin-1")
                headers[key] = f"{headers[key]}, {value}" if key in headers else value
            self._headers = headers
        return self._headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    # ========================================================================
    # Body
    # ========================================================================

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """
        Stream request body in chunks.

        Raises:
            ClientDisconnect: If client disconnects during streaming
            PayloadTooLarge: If body exceeds max_body_size
        """
        if self._body is not None:
            for i in range(0, len(self._body), self.chunk_size):
                yield self._body[i:i + self.chunk_size]
            return

        if self._body_consumed:
            return

        total_size = 0
        while True:
            message = await self._receive()

            if message["type"] == "http.disconnect":
                raise ClientDisconnect()

            if message["type"] == "http.request":
                chunk = message.get("body", b"")
                if chunk:
                    total_size += len(chunk)
                    if total_size > self.max_body_size:
                        raise PayloadTooLarge(max_allowed=self.max_body_size, actual=total_size)
                    yield chunk

                if not message.get("more_body", False):
                    break

        self._body_consumed = True

    async def body(self) -> bytes:
        """Read full request body (idempotent)."""
        if self._body is None:
            self._body = b"".join([chunk async for chunk in self.iter_bytes()])
        return self._body

    async def text(self, encoding: str = "utf-8") -> str:
        return (await self.body()).decode(encoding)
