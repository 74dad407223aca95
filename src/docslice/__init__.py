"""docslice.

Extracts documentation artifacts (doc comments and runnable examples) from
a directory of Python sources and serves excerpts of them to document
generators through a small sentence-slicing query language.
"""

__version__ = "0.1.0"
__author__ = "Scott"

from docslice.context.index import DocIndex
from docslice.errors import DocsliceError
from docslice.output.lookup import DocLookup

__all__ = [
    "__version__",
    "DocIndex",
    "DocLookup",
    "DocsliceError",
]
