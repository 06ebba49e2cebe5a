"""Top-level package for the scrapbook page rendering engine.

Provides subpackages:
- scrapbook_toolkit.core – page description models, schemas and parsing
- scrapbook_toolkit.engine – text layout, themes, QnA composition, renderers
  and the page compositor with its surfaces
"""

__version__ = "0.3.0"
__all__: list[str] = ["__version__"]
