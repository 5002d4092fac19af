"""
Trellis faults - Domain-specific fault types.

Controller configuration faults raised while resolving the HTTP method of
an action. All of them describe static defects in application code: they
are FATAL, never retryable, and never exposed to clients.
"""

from enum import Enum
from typing import Any, Iterable, Optional

from .core import Fault, FaultDomain, Severity


class ResolutionFaultKind(str, Enum):
    """Tag identifying which resolution rule was violated."""
    ACTION_NOT_FOUND = "ACTION_NOT_FOUND"
    MISCONFIGURED_RESTFUL_ACTION = "MISCONFIGURED_RESTFUL_ACTION"
    MULTIPLE_METHOD_MARKERS = "MULTIPLE_METHOD_MARKERS"
    UNSUPPORTED_RESTFUL_ACTION = "UNSUPPORTED_RESTFUL_ACTION"


def handler_name(handler: Any) -> str:
    """Qualified name of a controller class (or instance) for diagnostics."""
    cls = handler if isinstance(handler, type) else type(handler)
    return f"{cls.__module__}.{cls.__qualname__}"


# ============================================================================
# Method resolution faults
# ============================================================================

class MethodResolutionFault(Fault):
    """Base class for controller misconfiguration detected during verb resolution."""

    kind: ResolutionFaultKind

    def __init__(
        self,
        handler: Any,
        action: str,
        message: str,
        *,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.handler = handler
        self.action = action
        super().__init__(
            code=self.kind.value,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=Severity.FATAL,
            retryable=False,
            public=False,
            metadata={
                "handler": handler_name(handler),
                "action": action,
                **(metadata or {}),
            },
        )


class ActionNotFoundFault(MethodResolutionFault):
    """The requested action is not declared on the controller."""

    kind = ResolutionFaultKind.ACTION_NOT_FOUND

    def __init__(self, handler: Any, action: str):
        super().__init__(
            handler,
            action,
            f"Controller: {handler_name(handler)} has no action '{action}'",
        )


class MisconfiguredRestfulActionFault(MethodResolutionFault):
    """A RESTful controller carries an explicit per-action method marker."""

    kind = ResolutionFaultKind.MISCONFIGURED_RESTFUL_ACTION

    def __init__(self, handler: Any, action: str, markers: Iterable[Any] = ()):
        markers = [str(m) for m in markers]
        super().__init__(
            handler,
            action,
            f"Controller: {handler_name(handler)} is mis-configured. If @RESTful is used, "
            f"no action markers are allowed: @GET, @POST, @PUT, @DELETE. "
            f"Offending action: {action}",
            metadata={"markers": markers},
        )


class MultipleMethodMarkersFault(MethodResolutionFault):
    """An action declares more than one method marker."""

    kind = ResolutionFaultKind.MULTIPLE_METHOD_MARKERS

    def __init__(self, handler: Any, action: str, markers: Iterable[Any] = ()):
        markers = [str(m) for m in markers]
        super().__init__(
            handler,
            action,
            f"Controller: {handler_name(handler)} is mis-configured. Actions cannot "
            f"specify more than one HTTP method. Only one of @GET, @POST, @PUT, @DELETE "
            f"is allowed on action '{action}', found: {', '.join(markers)}",
            metadata={"markers": markers},
        )


class UnsupportedRestfulActionFault(MethodResolutionFault):
    """A RESTful controller exposes an action outside the convention table."""

    kind = ResolutionFaultKind.UNSUPPORTED_RESTFUL_ACTION

    def __init__(self, handler: Any, action: str, allowed: Iterable[str] = ()):
        allowed = list(allowed)
        super().__init__(
            handler,
            action,
            f"Controller: {handler_name(handler)} is RESTful and may only have the "
            f"following actions: {', '.join(allowed)}. Offending action: {action}",
            metadata={"allowed": allowed},
        )
