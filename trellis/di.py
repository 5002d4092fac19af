"""
Injection markers for controller constructors.

The container itself is supplied by the application: any object with a
``resolve(token, tag=None)`` method.

Usage:
    class BooksController(AppController):
        def __init__(self, repo: Annotated[BookRepo, Inject(tag="books")]):
            self.repo = repo
"""

from typing import Annotated, Any, Dict, Optional, Protocol, Type, get_args, get_origin, get_type_hints
from dataclasses import dataclass
import inspect


@dataclass(frozen=True)
class Inject:
    """
    Injection metadata marker.

    Attributes:
        token: What to resolve; defaults to the annotated type
        tag: Optional qualifier passed to the container
        optional: Leave the parameter to its default when resolution fails
    """
    token: Optional[Type | str] = None
    tag: Optional[str] = None
    optional: bool = False


class Container(Protocol):
    def resolve(self, token: Any, tag: Optional[str] = None) -> Any: ...


def injection_points(cls: type) -> Dict[str, tuple]:
    """
    Constructor parameters declaring an Inject marker.

    Returns:
        Mapping of parameter name to (token, Inject marker)
    """
    init = cls.__init__
    if init is object.__init__:
        return {}

    try:
        hints = get_type_hints(init, include_extras=True)
    except (NameError, TypeError):
        hints = getattr(init, "__annotations__", {})

    points = {}
    for name in inspect.signature(init).parameters:
        hint = hints.get(name)
        if get_origin(hint) is not Annotated:
            continue
        base, *extras = get_args(hint)
        for extra in extras:
            if isinstance(extra, Inject):
                points[name] = (extra.token or base, extra)
                break
    return points


def resolve_injections(cls: type, container: Container) -> Dict[str, Any]:
    """Constructor kwargs for ``cls`` resolved from ``container``."""
    kwargs = {}
    for name, (token, marker) in injection_points(cls).items():
        try:
            kwargs[name] = container.resolve(token, tag=marker.tag)
        except LookupError:
            if not marker.optional:
                raise
    return kwargs
