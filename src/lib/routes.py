"""
XML route configuration loader

Reads the declarative path -> file -> methods table:

    <routes>
      <route path="/greet" file="hello.html">
        <method>GET</method>
        <method>POST</method>
      </route>
    </routes>

Method elements may be spelled <method> or <methods>; their text is one of
GET, POST, PUT, DELETE, PATCH or ANY, case-insensitive. A missing or
malformed configuration is not fatal for serving or compiling: file-based
routing still works, so routes_loadOrEmpty() degrades to an empty table.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Union

from ..models.routes import RouteEntry, RouteTable
from .errors import RouteConfigError
from .log import LOG, WARN


METHOD_TAGS = ("method", "methods")


def routes_parse(text: str, source: str = "<string>") -> RouteTable:
    """
    Parse route configuration XML

    Args:
        text: XML document
        source: Name used in error messages

    Returns:
        RouteTable in document order

    Raises:
        RouteConfigError: Malformed XML or a route without path/file
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise RouteConfigError(source, e)

    entries: List[RouteEntry] = []
    for index, element in enumerate(root.iter("route")):
        path = element.get("path")
        file = element.get("file")
        if not path or not file:
            raise RouteConfigError(
                source, f"route #{index + 1} needs both 'path' and 'file' attributes"
            )

        methods = tuple(
            (child.text or "").strip().upper()
            for child in element
            if child.tag in METHOD_TAGS and (child.text or "").strip()
        )
        entries.append(RouteEntry(path=path, file=file, methods=methods))
        LOG(f"Route {path} -> {file} [{', '.join(methods)}]", level=3)

    return RouteTable(entries=tuple(entries))


def routes_load(config_path: Union[str, Path]) -> RouteTable:
    """
    Read and parse a route configuration file

    Raises:
        RouteConfigError: File unreadable or malformed
    """
    path = Path(config_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RouteConfigError(str(path), e)
    return routes_parse(text, source=str(path))


def routes_loadOrEmpty(config_path: Union[str, Path]) -> RouteTable:
    """
    Load a route configuration, falling back to an empty table

    Returns:
        Parsed RouteTable, or an empty one (with a warning) on failure
    """
    try:
        routes = routes_load(config_path)
    except RouteConfigError as e:
        WARN(f"Could not load route config: {e}")
        return RouteTable.empty()

    LOG(f"Loaded {len(routes)} routes from {config_path}", level=2)
    return routes
