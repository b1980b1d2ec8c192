"""
Placeholder templates backed by Jinja2.

``render`` HTML-escapes every value that is not already trusted markup
(``markupsafe.Markup``); ``render_unsafe`` inserts every value verbatim.
A placeholder with no value in the context is left in the output as written.

The page generators only use ``render``. ``render_unsafe`` is for callers
rendering custom templates from values that are already HTML, where
wrapping each one in ``trusted`` would be noise.
"""

import logging

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, Undefined
from markupsafe import Markup

from .errors import TemplateMissingError

logger = logging.getLogger('Quire.Templates')


class PlaceholderUndefined(Undefined):
    """Renders a missing placeholder back as ``{{ name }}``."""

    def __str__(self):
        logger.warning(f"Template warning: Placeholder '{self._undefined_name}' not found in context")
        return '{{ %s }}' % self._undefined_name

    def __html__(self):
        return str(self)


class TemplateEngine:
    def __init__(self, templates_dir):
        self.templates_dir = templates_dir
        loader = FileSystemLoader(templates_dir)
        self.env = Environment(loader=loader, autoescape=True, undefined=PlaceholderUndefined)
        self.raw_env = Environment(loader=loader, autoescape=False, undefined=PlaceholderUndefined)

    def _get_template(self, env, template_name):
        try:
            return env.get_template(template_name)
        except TemplateNotFound:
            raise TemplateMissingError(f"Template not found: {template_name} in {self.templates_dir}")

    def render(self, template_name, **context):
        """Render with every plain-text value HTML-escaped."""
        return self._get_template(self.env, template_name).render(**context)

    def render_unsafe(self, template_name, **context):
        """Render with every value inserted as-is. The caller is responsible for escaping."""
        return self._get_template(self.raw_env, template_name).render(**context)


def trusted(html):
    """Mark pre-rendered markup so ``render`` inserts it unescaped."""
    return Markup(html)
