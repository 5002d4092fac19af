"""
Trellis Controller System

Class-based controllers whose public methods are actions.

Key Features:
- Per-action HTTP methods declared with @GET, @POST, @PUT, @DELETE
- RESTful controllers whose actions follow a fixed naming convention
- Metadata extracted once at registration, misconfiguration fails fast
- Views rendered from "/<controller>/<action>" templates inside a layout

Example:
    from trellis import AppController, POST, RESTful

    class BooksController(AppController):
        def index(self):
            self.assign("books", repo.all())

        @POST
        async def save(self):
            data = await self.request_string()
            ...

    @RESTful
    class PhotosController(AppController):
        def index(self): ...
        def create(self): ...
"""

from .base import AppController, RequestCtx, RESERVED_VIEW_KEYS
from .decorators import (
    GET, POST, PUT, DELETE,
    HttpMethod,
    MethodMarker,
    RESTful,
)
from .metadata import (
    ActionMetadata,
    ControllerMetadata,
    MetadataRegistry,
    controller_path,
    extract_controller_metadata,
    get_default_registry,
)
from .render import RenderBuilder
from .resolver import (
    RESTFUL_ACTIONS,
    ActionMethodResolver,
    get_default_resolver,
    resolve_method,
)
from .engine import ControllerEngine

__all__ = [
    # Base
    "AppController",
    "RequestCtx",
    "RESERVED_VIEW_KEYS",

    # Decorators
    "GET", "POST", "PUT", "DELETE",
    "HttpMethod",
    "MethodMarker",
    "RESTful",

    # Metadata
    "ActionMetadata",
    "ControllerMetadata",
    "MetadataRegistry",
    "controller_path",
    "extract_controller_metadata",
    "get_default_registry",

    # Rendering
    "RenderBuilder",

    # Resolution
    "RESTFUL_ACTIONS",
    "ActionMethodResolver",
    "get_default_resolver",
    "resolve_method",

    # Engine
    "ControllerEngine",
]
