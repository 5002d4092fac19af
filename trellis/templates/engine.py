"""
Template Engine - Jinja2 rendering of controller views.

Template names follow the controller convention: "/books/index" is the
view of BooksController.index and resolves to "books/index.html" in the
configured template directories.
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape
from markupsafe import Markup


logger = logging.getLogger("trellis.templates.engine")


class TemplateEngine:
    """
    Async Jinja2 template engine.

    Args:
        search_paths: Template directories
        suffix: Appended to template names without an extension
        autoescape: Enable HTML autoescaping
        globals: Custom global variables/functions
        filters: Custom filters

    Example:
        engine = TemplateEngine(["templates"])
        html = await engine.render("/books/index", {"books": books},
                                   layout="/layouts/default_layout")
    """

    def __init__(
        self,
        search_paths: Optional[List[str]] = None,
        *,
        suffix: str = ".html",
        autoescape: bool = True,
        globals: Optional[Dict[str, Any]] = None,
        filters: Optional[Dict[str, Any]] = None,
    ):
        self.search_paths = list(search_paths or ["templates"])
        self.suffix = suffix

        self.env = Environment(
            loader=FileSystemLoader(self.search_paths),
            autoescape=select_autoescape(
                enabled_extensions=["html", "htm", "xml"],
                default_for_string=True,
            ) if autoescape else False,
            enable_async=True,
        )

        if filters:
            self.env.filters.update(filters)
        if globals:
            self.env.globals.update(globals)

    @classmethod
    def from_config(cls, config: Any) -> "TemplateEngine":
        return cls(
            config.template_dirs,
            suffix=config.template_suffix,
            autoescape=config.autoescape,
        )

    def template_path(self, name: str) -> str:
        """Loader path for a view name: "/books/index" -> "books/index.html"."""
        path = name.lstrip("/")
        last_segment = path.rsplit("/", 1)[-1]
        if self.suffix and "." not in last_segment:
            path += self.suffix
        return path

    def get_template(self, name: str) -> Template:
        """
        Load a template.

        Raises:
            jinja2.TemplateNotFound: no such template in the search paths
        """
        return self.env.get_template(self.template_path(name))

    async def render(
        self,
        template_name: str,
        context: Optional[Mapping[str, Any]] = None,
        *,
        layout: Optional[str] = None,
    ) -> str:
        """
        Render a view, optionally wrapped in a layout.

        The layout receives the view values plus ``page_content``, the
        rendered view.
        """
        context = dict(context or {})
        content = await self.get_template(template_name).render_async(context)

        if layout:
            logger.debug(f"Rendering {template_name} in layout {layout}")
            context["page_content"] = Markup(content)
            content = await self.get_template(layout).render_async(context)

        return content
