"""
Output expression parser and evaluator

Resolves the text inside <%= ... %> against the active variable scope and
the request context. Resolution order, first match wins:

    1. a name bound in the variable scope
    2. request.method / request.url / request.host / request.remoteaddr
    3. query.NAME
    4. form.NAME
    5. LEFT + RIGHT: integer sum, else the operands concatenated
    6. anything else is echoed as written

Unrecognized expressions are not errors; they render as their own text.

Example:
    >>> evaluate("2 + 3", {}, RequestContext.blank())
    '5'
    >>> evaluate("ab + cd", {}, RequestContext.blank())
    'abcd'
"""

import re
from typing import Callable, Dict

from ..models.context import RequestContext, VariableScope
from ..models.expression import Expression, Literal, Lookup, Namespaced, Sum


NAMESPACES = ("request", "query", "form")

REQUEST_FIELDS: Dict[str, Callable[[RequestContext], str]] = {
    "method": lambda context: context.method,
    "url": lambda context: context.url,
    "host": lambda context: context.host,
    "remoteaddr": lambda context: context.remoteaddr,
}

_integer = re.compile(r'[+-]?[0-9]+')

# Operands outside the signed 64-bit range are not numbers
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1


def expression_parse(expr: str) -> Lookup:
    """
    Parse an output expression into its node form

    Every expression is first a scope lookup of its full trimmed text; the
    fallback node covers the non-scope rules.

    Args:
        expr: Raw expression text (surrounding whitespace is ignored)

    Returns:
        Lookup node whose fallback is Namespaced, Sum or Literal
    """
    text = expr.strip()
    return Lookup(name=text, fallback=fallback_parse(text))


def fallback_parse(text: str) -> Expression:
    """Classify a trimmed expression that is not a scope name"""
    for namespace in NAMESPACES:
        prefix = namespace + "."
        if text.startswith(prefix):
            return Namespaced(namespace=namespace, key=text[len(prefix):], source=text)

    if "+" in text:
        parts = text.split("+")
        # Only a single '+' forms a sum; anything else is echoed
        if len(parts) == 2:
            return Sum(left=parts[0].strip(), right=parts[1].strip(), source=text)

    return Literal(text=text)


def integer_is(operand: str) -> bool:
    """Check if an operand is a signed 64-bit base-10 integer"""
    if _integer.fullmatch(operand) is None:
        return False
    return INTEGER_MIN <= int(operand) <= INTEGER_MAX


def expression_evaluate(
    node: Expression, scope: VariableScope, context: RequestContext
) -> str:
    """
    Evaluate a parsed expression node

    Args:
        node: Node produced by expression_parse()
        scope: Variable scope of the current render
        context: Request values for the namespaced lookups

    Returns:
        Rendered text
    """
    if isinstance(node, Lookup):
        if node.name in scope:
            return f"{scope[node.name]}"
        return expression_evaluate(node.fallback, scope, context)

    if isinstance(node, Namespaced):
        if node.namespace == "request":
            field = REQUEST_FIELDS.get(node.key)
            return field(context) if field else node.source
        if node.namespace == "query":
            return context.query.get(node.key, "")
        return context.form.get(node.key, "")

    if isinstance(node, Sum):
        if integer_is(node.left) and integer_is(node.right):
            return str(int(node.left) + int(node.right))
        # Non-numeric operands are joined without the '+'
        return node.left + node.right

    return node.text


def evaluate(expr: str, scope: VariableScope, context: RequestContext) -> str:
    """Parse and evaluate an output expression in one call"""
    return expression_evaluate(expression_parse(expr), scope, context)
