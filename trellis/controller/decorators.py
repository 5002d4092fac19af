"""
Controller Decorators

HTTP method markers for actions and the RESTful marker for controllers.
Attach metadata without import-time side effects; the metadata is read
once when the controller is registered.
"""

from enum import Enum
from typing import Any, Callable, TypeVar


F = TypeVar('F', bound=Callable[..., Any])
C = TypeVar('C', bound=type)


class HttpMethod(str, Enum):
    """HTTP methods an action may accept."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "HttpMethod":
        """Parse a method name case-insensitively."""
        try:
            return cls(value.upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {value!r}") from None


class MethodMarker:
    """
    Action method marker.

    Records the HTTP method on the decorated function under
    ``__http_methods__``. Stacking several markers is allowed here and
    rejected later, when the controller is registered.

    Example:
        class BooksController(AppController):
            @POST
            def save(self):
                ...
    """

    def __init__(self, method: HttpMethod):
        self.method = method

    def __call__(self, func: F) -> F:
        if not callable(func):
            raise TypeError(f"@{self.method} can only decorate actions, got {func!r}")

        if not hasattr(func, '__http_methods__'):
            func.__http_methods__ = []
        func.__http_methods__.append(self.method)

        return func

    def __repr__(self) -> str:
        return f"<MethodMarker {self.method}>"


GET = MethodMarker(HttpMethod.GET)
POST = MethodMarker(HttpMethod.POST)
PUT = MethodMarker(HttpMethod.PUT)
DELETE = MethodMarker(HttpMethod.DELETE)


def RESTful(cls: C) -> C:
    """
    Mark a controller as RESTful.

    Actions of a RESTful controller take their HTTP method from the
    naming convention (index, new_form, create, show, edit_form, update,
    destroy) and must not carry method markers. Subclasses inherit the flag.
    """
    if not isinstance(cls, type):
        raise TypeError(f"@RESTful can only decorate controller classes, got {cls!r}")

    cls.__restful__ = True
    return cls


def declared_methods(func: Any) -> tuple:
    """Markers declared on an action, in declaration order, without duplicates."""
    markers = getattr(func, '__http_methods__', ())
    # Decorators apply bottom-up; report them top-down as written
    return tuple(dict.fromkeys(reversed(markers)))
