"""
Models package for tagpress

Contains data structures and type definitions for the expansion engine and
the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .directives import Directive, DirectiveKind
from .expression import Expression, Literal, Lookup, Namespaced, Sum
from .routes import RouteEntry, RouteTable, METHOD_ANY
from .context import RequestContext, VariableScope

__all__ = [
    "ProgramState",
    "pipeline",
    "Directive",
    "DirectiveKind",
    "Expression",
    "Literal",
    "Lookup",
    "Namespaced",
    "Sum",
    "RouteEntry",
    "RouteTable",
    "METHOD_ANY",
    "RequestContext",
    "VariableScope",
]
