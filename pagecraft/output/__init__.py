"""Output module - text views for the command line.

Example usage:
    >>> from pagecraft.output import format_document_tree
    >>> print(format_document_tree(document))
    Landing (1 components)
    └── c1 [button @40,40 120x40]
"""

from .lib import (
    DocumentOutput,
    OutputGenerator,
    format_document_tree,
    format_generation_summary,
)

__all__ = [
    "DocumentOutput",
    "OutputGenerator",
    "format_document_tree",
    "format_generation_summary",
]
