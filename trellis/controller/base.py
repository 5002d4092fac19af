"""
Controller Base Class

Provides the AppController base class and the RequestCtx it is bound to
while an action runs.
"""

from typing import Any, AsyncIterator, Dict, MutableMapping, Optional, TYPE_CHECKING
from dataclasses import dataclass, field

from ..config import TrellisConfig
from ..di import injection_points
from .decorators import HttpMethod
from .metadata import controller_path, is_restful
from .render import RenderBuilder

if TYPE_CHECKING:
    from ..request import Request
    from .resolver import ActionMethodResolver


# Names the dispatch layer places in every view context
RESERVED_VIEW_KEYS = frozenset({
    "controller",
    "action",
    "layout",
    "page_content",
    "flasher",
    "session",
    "request",
})

FLASH_KEY = "flasher"


@dataclass
class RequestCtx:
    """
    Request context bound to a controller for the duration of an action.

    Attributes:
        request: The HTTP request
        action: Name of the action being executed
        session: Session mapping (if sessions are enabled)
        config: Framework configuration
        flash: Flash values stored by the previous request
        state: Additional state dictionary
    """

    request: "Request"
    action: str
    session: Optional[MutableMapping[str, Any]] = None
    config: Optional[TrellisConfig] = None
    flash: Dict[str, Any] = field(default_factory=dict)
    state: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def method(self) -> str:
        return self.request.method


class AppController:
    """
    Base class of application controllers.

    Public methods of a subclass are actions. An action assigns values for
    its view and, unless it returns a Response or calls ``render()``
    itself, the view "<controller path>/<action>" is rendered inside the
    controller's layout.

    Class Attributes:
        prefix: Controller path override (default derived from class name)

    Example:
        class BooksController(AppController):
            def index(self):
                self.assign("books", Book.all())

            @POST
            def save(self):
                ...
                self.render("saved").status(201)
    """

    prefix: str = ""

    _ctx: Optional[RequestCtx] = None
    _render_builder: Optional[RenderBuilder] = None

    # ========================================================================
    # Request binding
    # ========================================================================

    def bind(self, ctx: RequestCtx) -> None:
        """Attach the request context; called by the dispatch layer."""
        self._ctx = ctx
        self._render_builder = None
        self.__dict__["_view_values"] = {}

    @property
    def ctx(self) -> RequestCtx:
        if self._ctx is None:
            raise RuntimeError(
                f"{type(self).__name__} is not bound to a request; "
                "request data is only available while an action executes"
            )
        return self._ctx

    @property
    def request(self) -> "Request":
        return self.ctx.request

    # ========================================================================
    # View values
    # ========================================================================

    def assign(self, name: str, value: Any) -> None:
        """
        Assign a value that will be passed into the view.

        Raises:
            ValueError: value is None or name is reserved by the framework
            RuntimeError: render() was already called
        """
        self._check_not_rendered("assign values")

        if value is None:
            raise ValueError(f"value '{name}' is null")
        if name in RESERVED_VIEW_KEYS:
            raise ValueError(
                f"'{name}' is a reserved view name; do not use any of: "
                f"{', '.join(sorted(RESERVED_VIEW_KEYS))}"
            )

        self.values()[name] = value

    def view(self, name: str, value: Any) -> None:
        """Alias of assign()."""
        self.assign(name, value)

    def values(self) -> Dict[str, Any]:
        """Values assigned so far."""
        return self.__dict__.setdefault("_view_values", {})

    # ========================================================================
    # Rendering
    # ========================================================================

    def render(self, template: Optional[str] = None) -> RenderBuilder:
        """
        Render a view with the assigned values.

        This call must be the last call in the action; later calls to
        assign() or render() raise RuntimeError.

        Args:
            template: None for the view of the current action, "list" for
                another view of this controller, or "/other/view" for a
                view of another controller.

        Returns:
            RenderBuilder for layout, status and content type overrides
        """
        self._check_not_rendered("render")

        base = controller_path(type(self))
        if template is None:
            target = f"{base}/{self.ctx.action}"
        elif template.startswith("/"):
            target = template
        else:
            target = f"{base}/{template}"

        self._render_builder = RenderBuilder(target, self.values(), self.get_layout())
        return self._render_builder

    @property
    def render_builder(self) -> Optional[RenderBuilder]:
        """The pending render, if the action called render()."""
        return self._render_builder

    def _check_not_rendered(self, operation: str) -> None:
        if self._render_builder is not None:
            raise RuntimeError(
                f"Cannot {operation} after render() in {type(self).__name__}; "
                "render() must be the last call of an action"
            )

    def get_layout(self) -> Optional[str]:
        """
        Layout for this controller's views.

        Defaults to the configured ``default_layout``; override in a
        subclass to change the layout of a controller and its descendants.
        """
        config = self._ctx.config if self._ctx is not None else None
        return (config or TrellisConfig()).default_layout

    # ========================================================================
    # Request data
    # ========================================================================

    def path(self) -> str:
        """Request path."""
        return self.request.path

    def query_string(self) -> str:
        return self.request.query_string

    def param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        return self.request.query_param(name, default)

    def request_input_stream(self) -> AsyncIterator[bytes]:
        """Body chunks as sent by the client."""
        return self.request.iter_bytes()

    def request_stream(self) -> AsyncIterator[bytes]:
        """Alias of request_input_stream()."""
        return self.request_input_stream()

    async def request_bytes(self) -> bytes:
        """
        Entire request body. Do not use for large payloads, stream them
        with request_stream() instead.
        """
        return await self.request.body()

    async def request_string(self, encoding: str = "utf-8") -> str:
        """Entire request body decoded as text."""
        return await self.request.text(encoding)

    # ========================================================================
    # Session
    # ========================================================================

    def session(self) -> MutableMapping[str, Any]:
        session = self.ctx.session
        if session is None:
            raise RuntimeError("Sessions are not enabled for this request")
        return session

    def flash(self, name: str, value: Any) -> None:
        """Store a value displayed by the next request's view as flasher[name]."""
        self.session().setdefault(FLASH_KEY, {})[name] = value

    def flashed(self, name: str, default: Any = None) -> Any:
        """Flash value stored by the previous request."""
        return self.ctx.flash.get(name, default)

    # ========================================================================
    # Configuration
    # ========================================================================

    @classmethod
    def injectable(cls) -> bool:
        """True if the constructor declares Inject markers."""
        return bool(injection_points(cls))

    @classmethod
    def restful(cls) -> bool:
        """True if this controller is declared @RESTful."""
        return is_restful(cls)

    @classmethod
    def get_action_http_method(
        cls,
        action: str,
        resolver: Optional["ActionMethodResolver"] = None,
    ) -> HttpMethod:
        """
        HTTP method an action responds to.

        Undecorated actions of conventional controllers answer GET; actions
        of a @RESTful controller follow the RESTful naming convention.
        """
        from .resolver import get_default_resolver

        return (resolver or get_default_resolver()).resolve_method(cls, action)
