"""
Per-render context models

RequestContext carries the few request values output expressions can read.
VariableScope is the name -> value map populated by code blocks during one
render.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


# Created fresh for every top-level render and discarded afterwards
VariableScope = Dict[str, Any]


@dataclass(frozen=True)
class RequestContext:
    """
    Request values visible to the request.*, query.* and form.* namespaces

    Attributes:
        method: HTTP method (e.g., "GET")
        url: Request URI as sent by the client: path plus "?query" if any
        host: Host header value
        remoteaddr: Client address as "ip:port"
        query: Query parameters, first value per name
        form: Form fields from the body; names absent from the body fall
              back to the query value of the same name
    """
    method: str = ""
    url: str = ""
    host: str = ""
    remoteaddr: str = ""
    query: Dict[str, str] = field(default_factory=dict)
    form: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def blank(cls) -> "RequestContext":
        """Context for renders that do not originate from an HTTP request"""
        return cls()
