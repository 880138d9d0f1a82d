"""
Output expression models

The output expression language is tiny: a name, a namespaced request value,
or a two-operand sum. Each form is its own node type so resolution order and
fallback rules can be tested in isolation.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Literal:
    """Unrecognized expression, rendered as its own source text"""
    text: str


@dataclass(frozen=True)
class Namespaced:
    """
    Value from one of the request namespaces

    Attributes:
        namespace: "request", "query" or "form"
        key: Everything after the first dot (e.g., "method", "page")
        source: Original expression text, echoed for unmapped request keys
    """
    namespace: str
    key: str
    source: str


@dataclass(frozen=True)
class Sum:
    """
    Two-operand '+' expression

    Attributes:
        left: Trimmed left operand
        right: Trimmed right operand
        source: Original expression text
    """
    left: str
    right: str
    source: str


@dataclass(frozen=True)
class Lookup:
    """
    Variable scope lookup, the root of every parsed expression

    If the scope binds `name` the bound value wins; otherwise `fallback`
    is evaluated.
    """
    name: str
    fallback: "Expression"


Expression = Union[Literal, Namespaced, Sum, Lookup]
