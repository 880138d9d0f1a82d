"""
Shared fixtures: a small document root and route configuration on disk
"""

from pathlib import Path

import pytest

from tagpress.models.routes import RouteEntry, RouteTable


GREETING = '<% who = "World" %><h1>Hello <%= who %></h1>'

ROUTES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<routes>
  <route path="/greet" file="hello.html">
    <method>GET</method>
  </route>
</routes>
"""


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Document root with the greeting scenario, an index and a partial"""
    root = tmp_path / "root_http"
    (root / "partials").mkdir(parents=True)
    (root / "hello.html").write_text(GREETING, encoding="utf-8")
    (root / "index.html").write_text(
        '<%@include file="partials/header.html" %><p><%= title %></p>', encoding="utf-8"
    )
    (root / "partials" / "header.html").write_text('<% title = "Home" %><header/>', encoding="utf-8")
    (root / "notes.txt").write_text("not a document", encoding="utf-8")
    return root


@pytest.fixture
def routes_file(tmp_path: Path) -> Path:
    path = tmp_path / "routes.xml"
    path.write_text(ROUTES_XML, encoding="utf-8")
    return path


@pytest.fixture
def greet_routes() -> RouteTable:
    return RouteTable(entries=(RouteEntry(path="/greet", file="hello.html", methods=("GET",)),))
