"""
Controller Metadata Extraction

Scans a controller class once and records what the dispatch layer needs:
the controller path, the RESTful flag and, per action, its declared HTTP
method markers. The resulting table replaces per-request reflection.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type
from dataclasses import dataclass, field
import inspect
import logging
import re

from ..faults import ActionNotFoundFault
from .decorators import HttpMethod, declared_methods


logger = logging.getLogger("trellis.controller.metadata")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """
    Convert a PascalCase class name to snake_case.

    Example:
        underscore("HTTPClient") -> "http_client"
        underscore("BookAuthors") -> "book_authors"
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


# camelCase spellings accepted for the RESTful form actions
ACTION_ALIASES: Mapping[str, str] = MappingProxyType({
    "newForm": "new_form",
    "editForm": "edit_form",
})


def canonical_action(name: str) -> str:
    """Canonical name of an action: "newForm" -> "new_form", others unchanged."""
    return ACTION_ALIASES.get(name, name)


def action_spellings(name: str) -> Tuple[str, ...]:
    """
    Every spelling of the action slot ``name`` belongs to, ``name`` first.

    Example:
        action_spellings("new_form") -> ("new_form", "newForm")
        action_spellings("Index") -> ("Index",)
    """
    canonical = canonical_action(name)
    aliases = [alias for alias, target in ACTION_ALIASES.items() if target == canonical]
    return tuple(dict.fromkeys([name, canonical, *aliases]))


def controller_path(controller_class: Type) -> str:
    """
    URL path segment of a controller.

    Uses the ``prefix`` class attribute when set, otherwise derives it from
    the class name: ``BookAuthorsController`` -> ``/book_authors``.
    """
    prefix = getattr(controller_class, "prefix", "") or ""
    if prefix:
        return "/" + prefix.strip("/")

    name = controller_class.__name__
    if name.endswith("Controller") and name != "Controller":
        name = name[: -len("Controller")]
    return "/" + underscore(name)


@dataclass(frozen=True)
class ActionMetadata:
    """
    Metadata for a single action (controller method).

    Attributes:
        name: Method name
        markers: Declared HTTP method markers, in declaration order
        is_async: Whether the action is a coroutine function
    """
    name: str
    markers: Tuple[HttpMethod, ...] = ()
    is_async: bool = False


@dataclass
class ControllerMetadata:
    """
    Complete metadata for a controller class.

    Attributes:
        controller_class: The analyzed class
        class_name: Controller class name
        module_path: Import path ("package.module:ClassName")
        path: Controller path used for template lookup
        is_restful: Whether the controller is declared @RESTful
        actions: Action metadata keyed by method name
    """
    controller_class: Type
    class_name: str
    module_path: str
    path: str
    is_restful: bool = False
    actions: Dict[str, ActionMetadata] = field(default_factory=dict)

    def get_action(self, name: str) -> Optional[ActionMetadata]:
        """
        Find the action serving ``name``.

        Names match exactly. RESTful controllers also match the other
        spelling of the form actions, so "new_form" finds a ``newForm``
        method.
        """
        declared = self.declared_spellings(name)
        return declared[0] if declared else None

    def declared_spellings(self, name: str) -> List[ActionMetadata]:
        """Declared actions for ``name``, exact match first."""
        names = action_spellings(name) if self.is_restful else (name,)
        return [self.actions[n] for n in names if n in self.actions]

    @property
    def action_names(self) -> List[str]:
        return list(self.actions)


def is_restful(controller_class: Type) -> bool:
    """True if the class carries the @RESTful marker (inherited)."""
    return bool(getattr(controller_class, "__restful__", False))


def _is_action(attr: Any) -> bool:
    if isinstance(attr, (staticmethod, classmethod, property, type)):
        return False
    return inspect.isfunction(attr)


def extract_controller_metadata(controller_class: Type) -> ControllerMetadata:
    """
    Extract metadata from a controller class.

    Actions are the public functions defined on the class or its ancestors
    below AppController. Names already defined on AppController are
    framework hooks (``get_layout`` and friends), not actions.

    Args:
        controller_class: AppController subclass to analyze

    Returns:
        ControllerMetadata for the class
    """
    from .base import AppController

    if not (isinstance(controller_class, type) and issubclass(controller_class, AppController)):
        raise TypeError(f"{controller_class!r} is not an AppController subclass")

    actions: Dict[str, ActionMetadata] = {}
    reserved = set(dir(AppController))

    for klass in controller_class.__mro__:
        if klass is AppController or not issubclass(klass, AppController):
            continue
        for name, attr in vars(klass).items():
            if name.startswith("_") or name in reserved or name in actions:
                continue
            if not _is_action(attr):
                continue
            actions[name] = ActionMetadata(
                name=name,
                markers=declared_methods(attr),
                is_async=inspect.iscoroutinefunction(attr),
            )

    return ControllerMetadata(
        controller_class=controller_class,
        class_name=controller_class.__name__,
        module_path=f"{controller_class.__module__}:{controller_class.__qualname__}",
        path=controller_path(controller_class),
        is_restful=is_restful(controller_class),
        actions=actions,
    )


class MetadataRegistry:
    """
    Table of controller metadata keyed by controller class.

    Entries are extracted on first access and never change afterwards, so
    concurrent readers need no locking; two threads racing on the first
    access compute identical entries.
    """

    def __init__(self):
        self._controllers: Dict[Type, ControllerMetadata] = {}

    def register(self, controller_class: Type) -> ControllerMetadata:
        """Extract and store metadata for a controller (idempotent)."""
        metadata = self._controllers.get(controller_class)
        if metadata is None:
            metadata = extract_controller_metadata(controller_class)
            self._controllers[controller_class] = metadata
            logger.debug(
                f"Registered {metadata.module_path} "
                f"({len(metadata.actions)} actions, restful={metadata.is_restful})"
            )
        return metadata

    def get(self, controller_class: Type) -> ControllerMetadata:
        """Metadata for a controller, registering it on first use."""
        return self.register(controller_class)

    def find_action(self, controller_class: Type, action: str) -> Optional[ActionMetadata]:
        return self.get(controller_class).get_action(action)

    def get_action(self, controller_class: Type, action: str) -> ActionMetadata:
        """
        Metadata for one action.

        Raises:
            ActionNotFoundFault: the controller declares no such action
        """
        metadata = self.find_action(controller_class, action)
        if metadata is None:
            raise ActionNotFoundFault(controller_class, action)
        return metadata

    def __contains__(self, controller_class: Type) -> bool:
        return controller_class in self._controllers

    def __iter__(self):
        return iter(list(self._controllers.values()))

    def __len__(self) -> int:
        return len(self._controllers)

    def clear(self) -> None:
        self._controllers.clear()


_default_registry: Optional[MetadataRegistry] = None


def get_default_registry() -> MetadataRegistry:
    """Process-wide metadata registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = MetadataRegistry()
    return _default_registry
