"""
Directive processor

Expands one document in three fixed passes against one fresh variable
scope:

1. Includes: every <%@include file="..." %> is replaced by the target's
   content, itself include-expanded, so included fragments may carry
   code blocks and output tags of their own
2. Code blocks: every <% ... %> renders to nothing; `name = value` bodies
   bind a variable in the scope
3. Output tags: every <%= ... %> is replaced by its evaluated expression

Because all code blocks run before any output tag, an assignment is
visible to output tags anywhere in the document, before or after it.

Example:
    >>> processor = DirectiveProcessor(EmbeddedRegistry({}))
    >>> processor.expand('<% who = "World" %><h1>Hello <%= who %></h1>')
    '<h1>Hello World</h1>'
"""

from typing import Optional, Tuple

from ..config import appsettings
from ..models.context import RequestContext, VariableScope
from ..models.directives import Directive, DirectiveKind
from .errors import TemplateNotFound, TemplateReadError
from .expression import evaluate
from .log import LOG
from .registry import TemplateRegistry
from .scanner import directives_substitute


def includeError_format(description: object) -> str:
    """Inline marker substituted for an include that cannot be resolved"""
    return f"<!-- Include error: {description} -->"


def assignment_parse(body: str) -> Optional[Tuple[str, str]]:
    """
    Split a code block body into a (name, value) assignment

    The body is split once on its first '='. One layer of double quotes
    around the value is removed when present on both ends.

    Args:
        body: Raw code block body

    Returns:
        (name, value) tuple, or None when the body holds no '='

    Example:
        >>> assignment_parse(' title = "Home" ')
        ('title', 'Home')
        >>> assignment_parse('if x') is None
        True
    """
    code = body.strip()
    if "=" not in code:
        return None

    name, value = code.split("=", 1)
    name = name.strip()
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return name, value


class DirectiveProcessor:
    """
    Expands include, code block and output directives in a document

    A processor holds only read-only collaborators (the registry and the
    depth limit); each expand() call allocates its own scope, so one
    processor can serve any number of concurrent renders.
    """

    def __init__(
        self, registry: TemplateRegistry, max_depth: Optional[int] = None
    ) -> None:
        """
        Args:
            registry: Source of included documents
            max_depth: Deepest include nesting allowed before an inline
                       error marker replaces further recursion; 0 disables
                       the guard. Defaults to settings.include_max_depth.
        """
        self.registry = registry
        self.max_depth = appsettings.include_max_depth if max_depth is None else max_depth

    def render(self, identifier: str, context: Optional[RequestContext] = None) -> str:
        """
        Fetch a document and expand it

        Raises:
            TemplateNotFound: The document is not in the registry
            TemplateReadError: The document could not be read
        """
        content = self.registry.fetch(identifier)
        return self.expand(content, context)

    def expand(self, content: str, context: Optional[RequestContext] = None) -> str:
        """
        Expand all directives in a document

        Args:
            content: Raw document text
            context: Request values for output expressions

        Returns:
            Document with every directive expanded
        """
        if context is None:
            context = RequestContext.blank()
        scope: VariableScope = {}

        content = self.includes_expand(content)
        content = self.codeBlocks_apply(content, scope)
        content = self.outputs_render(content, scope, context)
        return content

    def includes_expand(self, content: str, depth: int = 0) -> str:
        """
        Replace include directives with the recursively expanded target

        A target that cannot be fetched is replaced with an inline comment
        marker and the remaining includes are still processed.

        Without a depth guard (max_depth == 0) a file that includes itself
        recurses until Python's RecursionError.

        Args:
            content: Text to scan for includes
            depth: Nesting level of `content` (0 for the top document)

        Returns:
            Text with includes resolved
        """

        def include_resolve(directive: Directive) -> str:
            path = directive.payload
            if self.max_depth and depth >= self.max_depth:
                LOG(f"Include depth limit reached at {path}", level=2)
                return includeError_format(
                    f"include depth limit ({self.max_depth}) exceeded at {path}"
                )
            try:
                included = self.registry.fetch(path)
            except (TemplateNotFound, TemplateReadError) as e:
                LOG(f"Include failed: {e}", level=2)
                return includeError_format(e)
            LOG(f"Include depth {depth + 1}: {path}", level=3)
            return self.includes_expand(included, depth + 1)

        return directives_substitute(content, DirectiveKind.INCLUDE, include_resolve)

    def codeBlocks_apply(self, content: str, scope: VariableScope) -> str:
        """
        Run code blocks left to right and remove them from the text

        Only `name = value` assignments have an effect. Any other body,
        including text that looks like control flow, is discarded.
        """

        def code_run(directive: Directive) -> str:
            assignment = assignment_parse(directive.payload)
            if assignment is not None:
                name, value = assignment
                scope[name] = value
            return ""

        return directives_substitute(content, DirectiveKind.CODE_BLOCK, code_run)

    def outputs_render(
        self, content: str, scope: VariableScope, context: RequestContext
    ) -> str:
        """Replace output tags with their evaluated expressions"""
        return directives_substitute(
            content,
            DirectiveKind.OUTPUT,
            lambda directive: evaluate(directive.payload, scope, context),
        )
