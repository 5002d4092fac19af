"""
Shared test fixtures and helpers for the Trellis test suite.
"""

import pytest
from typing import List, Optional

from trellis.config import TrellisConfig
from trellis.controller import ActionMethodResolver, ControllerEngine, MetadataRegistry
from trellis.request import Request
from trellis.templates import TemplateEngine


# ============================================================================
# Request Helpers
# ============================================================================


def make_scope(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: Optional[List[tuple]] = None,
) -> dict:
    """Build a minimal ASGI HTTP scope."""
    raw_headers = []
    for name, value in headers or []:
        raw_headers.append((name.encode("latin-1"), value.encode("latin-1")))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query_string.encode("utf-8"),
        "headers": raw_headers,
        "scheme": "http",
        "server": ("127.0.0.1", 8000),
        "client": ("127.0.0.1", 12345),
        "root_path": "",
    }


def make_receive(body: bytes = b"", *, chunks: Optional[List[bytes]] = None):
    """Create an ASGI receive callable from body bytes or chunked list."""
    if chunks:
        messages = [
            {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
            for i, chunk in enumerate(chunks)
        ]
    else:
        messages = [{"type": "http.request", "body": body, "more_body": False}]

    idx = 0

    async def receive():
        nonlocal idx
        if idx < len(messages):
            msg = messages[idx]
            idx += 1
            return msg
        return {"type": "http.disconnect"}

    return receive


def make_request(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: Optional[List[tuple]] = None,
    body: bytes = b"",
    **kwargs,
) -> Request:
    """Build a full Request object for testing."""
    scope = make_scope(method=method, path=path, query_string=query_string, headers=headers)
    return Request(scope, make_receive(body), **kwargs)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def registry():
    """Isolated metadata registry."""
    return MetadataRegistry()


@pytest.fixture
def resolver(registry):
    """Resolver bound to the isolated registry."""
    return ActionMethodResolver(registry)


@pytest.fixture
def template_dir(tmp_path):
    """Template tree with a default layout and views for the test controllers."""
    files = {
        "layouts/default_layout.html": "<html><body>{{ page_content }}</body></html>",
        "layouts/admin.html": "<admin>{{ page_content }}</admin>",
        "books/index.html": "{% for b in books %}[{{ b }}]{% endfor %}",
        "books/show.html": "book {{ book }} in {{ controller }}/{{ action }}",
        "books/list.html": "list of {{ books|length }}",
        "books/saved.html": "saved {{ title }}",
        "books/echo.html": "{{ body }}",
        "books/notice.html": "{{ flasher.get('notice', 'none') }}",
        "books/escape.html": "{{ title }}",
        "photos/index.html": "photos",
        "photos/create.html": "created",
        "shared/footer.html": "footer {{ year }}",
    }
    for name, source in files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
    return tmp_path


@pytest.fixture
def config(template_dir):
    return TrellisConfig(template_dirs=[str(template_dir)])


@pytest.fixture
def engine(config, resolver):
    """Controller engine over the test templates."""
    return ControllerEngine(
        config,
        resolver=resolver,
        templates=TemplateEngine.from_config(config),
    )
