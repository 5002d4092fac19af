"""Controller discovery for CLI commands."""

from typing import List, Sequence, Type
import importlib
import inspect
import sys
from pathlib import Path

from ..controller import AppController


def discover_controllers(modules: Sequence[str], *, search_path: str = ".") -> List[Type[AppController]]:
    """
    Import modules and collect the controllers they define.

    Controllers imported from elsewhere are skipped so each class is
    reported once, by the module that defines it.

    Args:
        modules: Dotted module names, e.g. "app.controllers.books"
        search_path: Directory prepended to sys.path for the imports

    Raises:
        ImportError: a module cannot be imported
    """
    root = str(Path(search_path).resolve())
    if root not in sys.path:
        sys.path.insert(0, root)

    controllers: List[Type[AppController]] = []
    for module_name in modules:
        module = importlib.import_module(module_name)
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if (
                issubclass(obj, AppController)
                and obj is not AppController
                and obj.__module__ == module.__name__
                and obj not in controllers
            ):
                controllers.append(obj)
    return controllers
