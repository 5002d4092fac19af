"""
Trellis - controller layer of an async Python MVC framework

Integration of:
- Controllers: class-based actions with per-action HTTP methods
- RESTful conventions: index, new_form, create, show, edit_form, update, destroy
- Views: Jinja2 templates rendered inside layouts
- Faults: Structured configuration errors detected at registration
- Config: Layered typed configuration
"""

__version__ = "0.1.0"

# ============================================================================
# Core Framework
# ============================================================================

from .config import ConfigError, ConfigLoader, TrellisConfig, load_config
from .request import Request
from .response import Response
from .di import Inject

# ============================================================================
# Controllers
# ============================================================================

from .controller import (
    AppController,
    RequestCtx,
    GET, POST, PUT, DELETE,
    HttpMethod,
    RESTful,
    RESTFUL_ACTIONS,
    ActionMethodResolver,
    MetadataRegistry,
    RenderBuilder,
    ControllerEngine,
    resolve_method,
)

# ============================================================================
# Templates
# ============================================================================

from .templates import TemplateEngine

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ResolutionFaultKind,
    MethodResolutionFault,
    ActionNotFoundFault,
    MisconfiguredRestfulActionFault,
    MultipleMethodMarkersFault,
    UnsupportedRestfulActionFault,
)

__all__ = [
    # Core
    "ConfigError",
    "ConfigLoader",
    "TrellisConfig",
    "load_config",
    "Request",
    "Response",
    "Inject",

    # Controllers
    "AppController",
    "RequestCtx",
    "GET", "POST", "PUT", "DELETE",
    "HttpMethod",
    "RESTful",
    "RESTFUL_ACTIONS",
    "ActionMethodResolver",
    "MetadataRegistry",
    "RenderBuilder",
    "ControllerEngine",
    "resolve_method",

    # Templates
    "TemplateEngine",

    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ResolutionFaultKind",
    "MethodResolutionFault",
    "ActionNotFoundFault",
    "MisconfiguredRestfulActionFault",
    "MultipleMethodMarkersFault",
    "UnsupportedRestfulActionFault",
]
