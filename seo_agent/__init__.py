"""SEO content agent: competitor analysis, article generation and publishing."""

__version__ = "0.1.0"
