"""
Controller Engine - Dispatches requests to controller actions.

Integrates with:
- ActionMethodResolver for the per-action HTTP method
- TemplateEngine for view rendering
- DI containers for injectable controllers
- Faults for error handling
"""

from typing import Any, Dict, Optional, Type
import inspect
import logging

from jinja2 import TemplateNotFound

from ..config import TrellisConfig
from ..di import Container, resolve_injections
from ..faults import ActionNotFoundFault, Fault, MethodResolutionFault
from ..request import Request
from ..response import Response
from ..templates import TemplateEngine
from .base import AppController, FLASH_KEY, RequestCtx
from .decorators import HttpMethod
from .render import RenderBuilder
from .resolver import ActionMethodResolver, get_default_resolver


class ControllerEngine:
    """
    Executes controller actions.

    Responsibilities:
    - Resolve the action's HTTP method and reject other methods (405)
    - Instantiate controllers, via the container when injectable
    - Bind the RequestCtx and invoke the action (sync or async)
    - Render the explicit or implicit view
    - Turn configuration faults into 500 responses

    Example:
        engine = ControllerEngine(config=load_config())
        engine.register(BooksController, AuthorsController)
        request = engine.build_request(scope, receive)
        response = await engine.dispatch(BooksController, "index", request)
    """

    def __init__(
        self,
        config: Optional[TrellisConfig] = None,
        *,
        resolver: Optional[ActionMethodResolver] = None,
        templates: Optional[TemplateEngine] = None,
        container: Optional[Container] = None,
    ):
        self.config = config or TrellisConfig()
        self.resolver = resolver or get_default_resolver()
        self.templates = templates or TemplateEngine.from_config(self.config)
        self.container = container
        self.logger = logging.getLogger("trellis.controller.engine")

    def register(self, *controllers: Type[AppController]) -> Dict[Type, Dict[str, HttpMethod]]:
        """
        Register controllers at startup.

        With ``validate_on_register`` every action is resolved immediately,
        so a misconfigured controller raises here instead of on its first
        request.

        Raises:
            MethodResolutionFault: a controller is misconfigured
        """
        table = {}
        for controller_class in controllers:
            if self.config.validate_on_register:
                table[controller_class] = self.resolver.validate(controller_class)
            else:
                self.resolver.registry.register(controller_class)
                table[controller_class] = {}
        return table

    def build_request(self, scope: Dict[str, Any], receive: Any = None) -> Request:
        """Request for an ASGI scope, bounded by the configured ``max_body_size``."""
        return Request(scope, receive, max_body_size=self.config.max_body_size)

    async def dispatch(
        self,
        controller_class: Type[AppController],
        action: str,
        request: Any,
        *,
        session: Optional[Dict[str, Any]] = None,
    ) -> Response:
        """
        Execute an action for a request.

        Args:
            controller_class: Controller owning the action
            action: Action name as declared, or newForm/editForm on RESTful controllers
            request: The request
            session: Session mapping, if sessions are enabled

        Returns:
            Response of the action
        """
        try:
            method = self.resolver.resolve_method(controller_class, action)
        except MethodResolutionFault as fault:
            self.logger.error(
                f"Cannot dispatch {fault.metadata['handler']}.{action}: {fault}",
                extra={"fault": fault.to_dict()},
            )
            return self._fault_response(fault)

        if not self._method_allowed(method, request.method):
            self.logger.info(
                f"{request.method} not allowed for {controller_class.__name__}.{action} "
                f"(accepts {method})"
            )
            return Response(
                f"Method {request.method} not allowed, use {method}",
                status=405,
                headers={"allow": method.value},
            )

        declared = self.resolver.registry.find_action(controller_class, action)
        if declared is None:
            # RESTful convention names resolve before existence is checked
            fault = ActionNotFoundFault(controller_class, action)
            self.logger.error(f"Cannot dispatch {fault.metadata['handler']}.{action}: {fault}")
            return self._fault_response(fault)

        try:
            return await self._execute(controller_class, declared.name, request, session)
        except Fault as fault:
            self.logger.error(f"Action {controller_class.__name__}.{declared.name} failed: {fault}")
            return self._fault_response(fault)
        except TemplateNotFound as exc:
            self.logger.error(f"View of {controller_class.__name__}.{declared.name} not found: {exc.name}")
            return Response(
                {"error": "INTERNAL_ERROR", "message": "Internal server error"}, status=500
            )

    async def _execute(
        self,
        controller_class: Type[AppController],
        action: str,
        request: Any,
        session: Optional[Dict[str, Any]],
    ) -> Response:
        flash = session.pop(FLASH_KEY, {}) if session is not None else {}
        ctx = RequestCtx(
            request=request,
            action=action,
            session=session,
            config=self.config,
            flash=flash,
        )

        controller = self._instantiate(controller_class)
        controller.bind(ctx)

        result = getattr(controller, action)()
        if inspect.isawaitable(result):
            result = await result

        if isinstance(result, Response):
            return result
        if result is not None and not isinstance(result, RenderBuilder):
            self.logger.warning(
                f"{controller_class.__name__}.{action} returned {type(result).__name__}; "
                "ignored, actions render views or return a Response"
            )

        builder = controller.render_builder or controller.render()
        return await self._render(builder, ctx)

    def _instantiate(self, controller_class: Type[AppController]) -> AppController:
        if self.container is not None and controller_class.injectable():
            return controller_class(**resolve_injections(controller_class, self.container))
        return controller_class()

    async def _render(self, builder: RenderBuilder, ctx: RequestCtx) -> Response:
        context = dict(builder.values)
        context.update(
            controller=builder.template.rsplit("/", 1)[0],
            action=ctx.action,
            flasher=ctx.flash,
            session=ctx.session or {},
            request=ctx.request,
        )

        content = await self.templates.render(
            builder.template,
            context,
            layout=builder.selected_layout,
        )
        return Response(
            content,
            status=builder.selected_status,
            media_type=builder.selected_content_type or self.config.default_content_type,
        )

    @staticmethod
    def _method_allowed(method: HttpMethod, request_method: str) -> bool:
        if request_method == "HEAD":
            return method is HttpMethod.GET
        return request_method == method.value

    def _fault_response(self, fault: Fault) -> Response:
        status = getattr(fault, "status", 500)
        if fault.public:
            return Response({"error": fault.code, "message": fault.message}, status=status)
        return Response({"error": "INTERNAL_ERROR", "message": "Internal server error"}, status=status)
