"""
Action Method Resolver

Decides which HTTP method an action accepts.

Conventional controllers declare it per action with @GET, @POST, @PUT or
@DELETE; an undecorated action answers GET. RESTful controllers take it
from the naming convention in RESTFUL_ACTIONS and may not declare markers.
Every violation is a configuration fault, raised at registration time when
controllers are validated up front.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Type
import logging

from ..faults import (
    MisconfiguredRestfulActionFault,
    MultipleMethodMarkersFault,
    UnsupportedRestfulActionFault,
)
from .decorators import HttpMethod
from .metadata import MetadataRegistry, canonical_action, get_default_registry, is_restful


logger = logging.getLogger("trellis.controller.resolver")


RESTFUL_ACTIONS: Mapping[str, HttpMethod] = MappingProxyType({
    "index": HttpMethod.GET,
    "new_form": HttpMethod.GET,
    "create": HttpMethod.POST,
    "show": HttpMethod.GET,
    "edit_form": HttpMethod.GET,
    "update": HttpMethod.PUT,
    "destroy": HttpMethod.DELETE,
})


class ActionMethodResolver:
    """
    Resolves the HTTP method of controller actions.

    Results are cached per (controller, action name as given). Metadata
    never changes after registration, so a cache entry is written at most
    once with the same value whichever thread gets there first. Faults are
    not cached.

    Example:
        resolver = ActionMethodResolver()
        resolver.resolve_method(BooksController, "create")  # HttpMethod.POST
    """

    def __init__(self, registry: Optional[MetadataRegistry] = None):
        self.registry = registry or get_default_registry()
        self._cache: Dict[Tuple[Type, str], HttpMethod] = {}

    @staticmethod
    def is_restful(controller_class: Type) -> bool:
        """True if the controller is declared @RESTful."""
        return is_restful(controller_class)

    def resolve_method(self, controller_class: Type, action: str) -> HttpMethod:
        """
        HTTP method accepted by an action.

        Args:
            controller_class: Controller declaring the action
            action: Action name; RESTful controllers also accept newForm/editForm

        Returns:
            The single HttpMethod the action accepts

        Raises:
            ActionNotFoundFault: conventional controller without such action
            MisconfiguredRestfulActionFault: RESTful action carrying markers
            MultipleMethodMarkersFault: action with more than one marker
            UnsupportedRestfulActionFault: RESTful action outside the convention
        """
        key = (controller_class, action)
        method = self._cache.get(key)
        if method is None:
            method = self._resolve(controller_class, action)
            self._cache[key] = method
            logger.debug(f"{controller_class.__name__}.{action} accepts {method}")
        return method

    def _resolve(self, controller_class: Type, action: str) -> HttpMethod:
        if self.is_restful(controller_class):
            return self._resolve_restful(controller_class, action)

        markers = self.registry.get_action(controller_class, action).markers
        if len(markers) > 1:
            raise MultipleMethodMarkersFault(controller_class, action, markers)
        if not markers:
            return HttpMethod.GET
        return markers[0]

    def _resolve_restful(self, controller_class: Type, action: str) -> HttpMethod:
        # Every declared spelling of the slot is checked, not only the one asked for
        for declared in self.registry.get(controller_class).declared_spellings(action):
            if declared.markers:
                raise MisconfiguredRestfulActionFault(controller_class, declared.name, declared.markers)

        method = RESTFUL_ACTIONS.get(canonical_action(action))
        if method is None:
            raise UnsupportedRestfulActionFault(controller_class, action, RESTFUL_ACTIONS)
        return method

    def validate(self, controller_class: Type) -> Dict[str, HttpMethod]:
        """
        Resolve every action of a controller.

        Call at startup so misconfigured controllers fail before serving
        the first request.

        Returns:
            Mapping of action name to HTTP method
        """
        metadata = self.registry.register(controller_class)
        resolved = {
            name: self.resolve_method(controller_class, name)
            for name in metadata.actions
        }
        logger.info(
            f"Validated {metadata.module_path}: {len(resolved)} actions"
            + (" (RESTful)" if metadata.is_restful else "")
        )
        return resolved

    def clear_cache(self) -> None:
        self._cache.clear()


_default_resolver: Optional[ActionMethodResolver] = None


def get_default_resolver() -> ActionMethodResolver:
    """Process-wide resolver bound to the default metadata registry."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = ActionMethodResolver(get_default_registry())
    return _default_resolver


def resolve_method(controller_class: Type, action: str) -> HttpMethod:
    """Resolve an action's HTTP method with the default resolver."""
    return get_default_resolver().resolve_method(controller_class, action)
