"""
RenderBuilder - deferred view rendering returned by AppController.render().
"""

from typing import Any, Dict, Optional


class RenderBuilder:
    """
    Describes a view to render once the action returns.

    Returned by ``AppController.render()`` so an action can override the
    layout, status code and content type:

        self.render("list").layout("/layouts/admin").status(201)
    """

    def __init__(self, template: str, values: Dict[str, Any], layout: Optional[str]):
        self.template = template
        self.values = values
        self._layout = layout
        self._status = 200
        self._content_type: Optional[str] = None

    def layout(self, layout: str) -> "RenderBuilder":
        """Use another layout, e.g. "/layouts/admin"."""
        self._layout = layout
        return self

    def no_layout(self) -> "RenderBuilder":
        """Render the view without a layout."""
        self._layout = None
        return self

    def status(self, status: int) -> "RenderBuilder":
        self._status = status
        return self

    def content_type(self, content_type: str) -> "RenderBuilder":
        self._content_type = content_type
        return self

    @property
    def selected_layout(self) -> Optional[str]:
        return self._layout

    @property
    def selected_status(self) -> int:
        return self._status

    @property
    def selected_content_type(self) -> Optional[str]:
        return self._content_type

    def __repr__(self) -> str:
        return f"<RenderBuilder template={self.template!r} layout={self._layout!r} status={self._status}>"
