"""
Tag scanner for <% %> directives

Locates the three directive forms in raw document text:

    <%@include file="PATH" %>    include
    <% BODY %>                   code block (BODY does not start with '=')
    <%= EXPR %>                  output expression

Matching is pattern based and non-recursive: each pass finds the
non-overlapping matches of one form, left to right. Tags that do not match
a form's exact grammar are left as literal text.

Example:
    >>> [d.kind.value for d in directives_find('<% a = 1 %>x<%= a %>')]
    ['code', 'output']
"""

import re
from typing import Callable, Dict, Iterator, List, Pattern

from ..models.directives import Directive, DirectiveKind


PATTERNS: Dict[DirectiveKind, Pattern[str]] = {
    DirectiveKind.INCLUDE: re.compile(r'<%@include\s+file="([^"]+)"\s*%>'),
    DirectiveKind.CODE_BLOCK: re.compile(r'<%\s*([^=][^%]*)\s*%>'),
    DirectiveKind.OUTPUT: re.compile(r'<%=\s*([^%]+)\s*%>'),
}


def directive_fromMatch(kind: DirectiveKind, match: "re.Match[str]") -> Directive:
    """Wrap a regex match as a Directive"""
    return Directive(
        kind=kind,
        payload=match.group(1),
        source=match.group(0),
        position=match.start(),
    )


def directives_scan(text: str, kind: DirectiveKind) -> Iterator[Directive]:
    """
    Yield every match of one directive form, left to right

    Args:
        text: Document text to scan
        kind: Directive form to look for

    Yields:
        Directive for each non-overlapping match
    """
    for match in PATTERNS[kind].finditer(text):
        yield directive_fromMatch(kind, match)


def directives_substitute(
    text: str, kind: DirectiveKind, handler: Callable[[Directive], str]
) -> str:
    """
    Replace every match of one directive form with the handler's result

    Text outside the matches is returned untouched. Handler results are not
    rescanned in this pass.

    Args:
        text: Document text
        kind: Directive form to replace
        handler: Called with each Directive, returns its replacement text

    Returns:
        Text with all matches of `kind` substituted
    """
    pattern = PATTERNS[kind]
    return pattern.sub(lambda match: handler(directive_fromMatch(kind, match)), text)


def directives_find(text: str) -> List[Directive]:
    """
    All directives of every form, ordered by position

    Each form is scanned independently, so an include tag can also show up
    as a code block here; the processor never sees that because includes
    are substituted before code blocks are scanned.
    """
    found: List[Directive] = []
    for kind in DirectiveKind:
        found.extend(directives_scan(text, kind))
    return sorted(found, key=lambda d: d.position)
