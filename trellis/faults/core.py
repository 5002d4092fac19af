"""
Trellis faults - Core types.

Defines:
- Severity levels
- FaultDomain (which part of the framework raised the fault)
- Fault base class
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """How bad a fault is; FATAL faults mean the application itself is broken."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Named fault domain.

    Two domains are equal when their names are, and a domain also compares
    equal to its name as a plain string.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    @property
    def value(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            other = other.name
        return self.name == other

    def __hash__(self) -> int:
        return hash(self.name)


# Controller definitions that cannot work
FaultDomain.CONFIG = FaultDomain("config", "Controller and framework configuration")
# Failures while an action runs
FaultDomain.FLOW = FaultDomain("flow", "Action execution")


DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.FLOW: {"severity": Severity.ERROR, "retryable": False},
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Structured framework error.

    Subclasses may declare ``code``, ``message`` and ``domain`` as class
    attributes instead of passing them. Severity and retryability default
    from the domain.

    Attributes:
        code: Stable identifier such as "ACTION_NOT_FOUND"
        message: Human readable description
        domain: FaultDomain the fault belongs to
        severity: Severity level
        retryable: Whether repeating the operation can succeed
        public: Whether code and message may be shown to clients
        metadata: Diagnostic details

    Example:
        raise Fault(
            code="LAYOUT_MISSING",
            message="Layout '/layouts/admin' not found",
            domain=FaultDomain.CONFIG,
        )
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        public: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.code = code or getattr(type(self), "code", None)
        self.message = message or getattr(type(self), "message", None)
        self.domain = domain or getattr(type(self), "domain", None)

        missing = [name for name in ("code", "message", "domain") if getattr(self, name) is None]
        if missing:
            raise TypeError(f"{type(self).__name__} requires {', '.join(missing)}")

        super().__init__(self.message)

        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR, "retryable": False})
        self.severity = severity or defaults["severity"]
        self.retryable = defaults["retryable"] if retryable is None else retryable
        self.public = public
        self.metadata = dict(metadata or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, domain={self.domain}, severity={self.severity.value})"

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of the fault, for structured logs."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "public": self.public,
            "metadata": self.metadata,
        }
