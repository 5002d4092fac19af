"""
Response - value object returned by the dispatch layer.
"""

from typing import Any, Dict, Mapping, Optional, Union
import json


class Response:
    """
    HTTP response.

    Holds the status, headers and encoded body. Content may be bytes, str
    or a JSON-serializable dict/list; the content type is detected from it
    unless given.

    Args:
        content: Response body
        status: HTTP status code
        headers: Response headers
        media_type: Content-Type override
        encoding: Text encoding (default utf-8)
    """

    def __init__(
        self,
        content: Union[bytes, str, Mapping, list] = b"",
        status: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        media_type: Optional[str] = None,
        *,
        encoding: str = "utf-8",
    ):
        self.status = status
        self.encoding = encoding
        self._content = content

        self._headers: Dict[str, str] = {}
        if headers:
            for key, value in headers.items():
                self._headers[key.lower()] = value

        if media_type:
            self._headers["content-type"] = media_type
        elif "content-type" not in self._headers:
            self._headers["content-type"] = self._detect_media_type(content)

    @property
    def headers(self) -> Dict[str, str]:
        return self._headers

    @property
    def media_type(self) -> str:
        return self._headers.get("content-type", "")

    @property
    def body(self) -> bytes:
        """Encoded response body."""
        content = self._content
        if isinstance(content, bytes):
            return content
        if isinstance(content, str):
            return content.encode(self.encoding)
        return json.dumps(content).encode(self.encoding)

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding)

    def _detect_media_type(self, content: Any) -> str:
        if isinstance(content, (dict, list)):
            return "application/json"
        if isinstance(content, str):
            return f"text/plain; charset={self.encoding}"
        return "application/octet-stream"

    @classmethod
    def html(cls, content: str, status: int = 200, **kwargs) -> "Response":
        return cls(content, status, media_type="text/html; charset=utf-8", **kwargs)

    @classmethod
    def json(cls, content: Any, status: int = 200, **kwargs) -> "Response":
        return cls(content, status, media_type="application/json", **kwargs)

    def __repr__(self) -> str:
        return f"<Response status={self.status} media_type={self.media_type!r}>"
