"""
Structural editing of Clojure source strings.

Pure operations (no I/O): balance checking, locating the top-level form at a
line, and wrapping that form in a template while preserving the rest of the
file byte for byte.
"""

from .errors import ErrorKind, StructuralError, TemplateError
from .operations import (
    CLOJURE_EXTENSIONS,
    LocatedForm,
    count_top_level_forms,
    is_balanced,
    is_clojure_source_file,
    locate_top_level_form,
    wrap_form_str,
    wrap_in_source,
)
from .template import Template

__all__ = [
    # Operations
    "is_balanced",
    "locate_top_level_form",
    "wrap_form_str",
    "wrap_in_source",
    "count_top_level_forms",
    "is_clojure_source_file",

    # Values
    "LocatedForm",
    "Template",
    "StructuralError",
    "TemplateError",
    "ErrorKind",
    "CLOJURE_EXTENSIONS",
]
