"""
Wrap templates: text with exactly one placeholder marker.

Substitution is literal and single-site. The marker text appearing inside the
substituted form is never touched, and no escaping is recognised: a marker
inside one of the template's own string literals is still the substitution
site.
"""

from dataclasses import dataclass, field
from typing import Union

from basic_tools_mcp.config import DEFAULT_PLACEHOLDER


@dataclass(frozen=True)
class Template:
    text: str
    placeholder: str = field(default=DEFAULT_PLACEHOLDER)

    @classmethod
    def coerce(cls, template: Union["Template", str], placeholder: str = DEFAULT_PLACEHOLDER) -> "Template":
        if isinstance(template, Template):
            return template
        if not isinstance(template, str):
            raise TypeError(f"Template must be a string, got {type(template).__name__}")
        return cls(template, placeholder)

    @property
    def marker_count(self) -> int:
        return self.text.count(self.placeholder)

    @property
    def is_valid(self) -> bool:
        return self.marker_count == 1

    def render(self, form_text: str) -> str:
        """Substitute form_text at the template's single marker site."""
        head, _, tail = self.text.partition(self.placeholder)
        return head + form_text + tail

    def __str__(self) -> str:
        return self.text
