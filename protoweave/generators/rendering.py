"""Jinja2 rendering of generated Java snippets."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

_DEFAULT_DIR = Path(__file__).with_name("templates")


class TemplateRenderer:
    """Renders snippets from user templates first, then the bundled ones."""

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_DIR))
        # ensure uniqueness preserving order
        ordered = list(dict.fromkeys(directories))
        self._env = Environment(
            loader=FileSystemLoader(ordered),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, **context: Any) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context)


__all__ = ["TemplateRenderer"]
