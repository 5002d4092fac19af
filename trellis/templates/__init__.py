"""
Trellis templates - Jinja2 view rendering for controllers.
"""

from .engine import TemplateEngine

__all__ = ["TemplateEngine"]
