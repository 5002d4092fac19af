"""
Trellis faults - structured fault signals.

Faults are typed exceptions carrying a stable code, a domain, a severity
and diagnostic metadata. Controller misconfiguration surfaces as one of the
method resolution faults, each tagged with a ResolutionFaultKind so the
dispatch layer can match on the kind instead of the class.
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    ResolutionFaultKind,
    MethodResolutionFault,
    ActionNotFoundFault,
    MisconfiguredRestfulActionFault,
    MultipleMethodMarkersFault,
    UnsupportedRestfulActionFault,
    handler_name,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",

    # Method resolution
    "ResolutionFaultKind",
    "MethodResolutionFault",
    "ActionNotFoundFault",
    "MisconfiguredRestfulActionFault",
    "MultipleMethodMarkersFault",
    "UnsupportedRestfulActionFault",
    "handler_name",
]
