"""
Directive models

Defines the three directive forms recognized in document text and the
transient match object the scanner hands to the processor.
"""

from enum import Enum
from dataclasses import dataclass


class DirectiveKind(Enum):
    """
    Kinds of tagpress directives

    Listed in the order the processor expands them.
    """
    INCLUDE = "include"          # <%@include file="PATH" %>
    CODE_BLOCK = "code"          # <% BODY %>
    OUTPUT = "output"            # <%= EXPR %>


@dataclass(frozen=True)
class Directive:
    """
    A directive located in document text

    Exists only for the duration of one expansion pass and is never stored.

    Attributes:
        kind: Which of the three forms matched
        payload: The captured part: include path, raw code body, or raw
                 output expression (untrimmed, exactly as captured)
        source: The full matched text, tag delimiters included
        position: Character offset of the match in the scanned text

    Example:
        For text 'Hi <%= name %>' the scanner yields:
        Directive(kind=DirectiveKind.OUTPUT, payload="name ",
                  source="<%= name %>", position=3)
    """
    kind: DirectiveKind
    payload: str
    source: str
    position: int
