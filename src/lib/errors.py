"""
Exception types raised by the tagpress engine and compiler.
"""


class TagpressError(Exception):
    """Base class for all tagpress errors"""
    pass


class TemplateNotFound(TagpressError):
    """Raised when a document identifier is absent from the registry"""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"template {identifier} not found")


class TemplateReadError(TagpressError):
    """Raised when the backing storage fails while reading a document"""

    def __init__(self, identifier: str, cause: Exception):
        self.identifier = identifier
        self.cause = cause
        super().__init__(f"cannot read {identifier}: {cause}")


class RouteConfigError(TagpressError):
    """Raised when the route configuration is missing or malformed"""

    def __init__(self, path: str, cause: object):
        self.path = path
        self.cause = cause
        super().__init__(f"route config {path}: {cause}")


class CompilationStepError(TagpressError):
    """
    Raised when one step of the compilation pipeline fails

    Attributes:
        step: Name of the failing step ("scan", "generate", "workspace", "build", "install")
        cause: Underlying exception
    """

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"{step} step failed: {cause}")
