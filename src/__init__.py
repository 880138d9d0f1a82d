"""
tagpress - JSP-style directive engine and document compiler

Renders documents carrying <% %> directives and freezes a document tree
into a standalone server executable.
"""

__version__ = "1.0.0"

from .lib import DirectiveProcessor, EmbeddedRegistry, FileSystemRegistry, Compiler, LOG, state_connectToLogger

__all__ = [
    "DirectiveProcessor",
    "EmbeddedRegistry",
    "FileSystemRegistry",
    "Compiler",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
