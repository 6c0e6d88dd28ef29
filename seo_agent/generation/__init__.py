"""Template catalogs and article rendering."""

from .catalog import DEFAULT_CATALOG, Catalog
from .generator import ContentGenerator, SlugNonce, fill_template, unresolved_placeholders

__all__ = [
    "DEFAULT_CATALOG",
    "Catalog",
    "ContentGenerator",
    "SlugNonce",
    "fill_template",
    "unresolved_placeholders",
]
