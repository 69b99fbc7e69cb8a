"""Template rendering service using Jinja2.

Renders the plain-text bodies of queued emails. Templates are rendered with
StrictUndefined so a missing variable fails loudly instead of producing an
email with a blank link.
"""

from typing import Optional
from jinja2 import Environment, BaseLoader, StrictUndefined, TemplateError

from app.logging_config import get_logger

logger = get_logger(__name__)


class TemplateRenderError(Exception):
    """Raised when template rendering fails."""
    pass


class TemplateRenderer:
    """Service for rendering Jinja2 text templates."""

    def __init__(self):
        """Initialize Jinja2 environment for plain-text output."""
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=False,  # Output is plain text, not HTML
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )

    def render(self, template_text: str, context: dict) -> str:
        """Render template with context variables.

        Args:
            template_text: Template string with Jinja2 syntax
            context: Dictionary of variables for template

        Returns:
            Rendered text

        Raises:
            TemplateRenderError: If template is invalid or variables are missing

        Example:
            >>> renderer = TemplateRenderer()
            >>> renderer.render("Resume here: {{ resume_url }}", {"resume_url": "/survey?token=t"})
            'Resume here: /survey?token=t'
        """
        try:
            template = self.env.from_string(template_text)
            return template.render(context)
        except TemplateError as e:
            logger.error(f"Template rendering error: {e}")
            raise TemplateRenderError(f"Failed to render template: {e}") from e


# Global singleton instance
_renderer_instance: Optional[TemplateRenderer] = None


def get_template_renderer() -> TemplateRenderer:
    """Get global TemplateRenderer instance.

    Returns:
        Global TemplateRenderer instance
    """
    global _renderer_instance
    if _renderer_instance is None:
        _renderer_instance = TemplateRenderer()
    return _renderer_instance
