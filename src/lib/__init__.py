"""
tagpress - JSP-style directive engine and document compiler

Renders documents carrying <% %> directives and freezes a document tree
into a standalone server executable.
"""

__version__ = "1.0.0"

from .processor import DirectiveProcessor
from .registry import EmbeddedRegistry, FileSystemRegistry, TemplateRegistry
from .compiler import Compiler
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "DirectiveProcessor",
    "EmbeddedRegistry",
    "FileSystemRegistry",
    "TemplateRegistry",
    "Compiler",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
