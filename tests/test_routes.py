"""
Route configuration tests
"""

import pytest

from tagpress.lib.errors import RouteConfigError
from tagpress.lib.routes import routes_load, routes_loadOrEmpty, routes_parse
from tagpress.models.routes import RouteEntry, RouteTable


class TestParse:
    """Test XML parsing"""

    def test_single_route(self, routes_file):
        routes = routes_load(routes_file)

        assert len(routes) == 1
        assert routes.entries[0] == RouteEntry(path="/greet", file="hello.html", methods=("GET",))

    def test_methods_case_insensitive_and_ordered(self):
        routes = routes_parse(
            '<routes><route path="/a" file="a.html">'
            "<method>post</method><method> Get </method><method>any</method>"
            "</route></routes>"
        )
        entry = routes.entries[0]

        assert entry.methods == ("POST", "GET", "ANY")
        assert entry.any_is()

    def test_methods_element_spelling(self):
        """<methods> elements are accepted as well as <method>"""
        routes = routes_parse(
            '<routes><route path="/a" file="a.html"><methods>DELETE</methods></route></routes>'
        )
        assert routes.entries[0].methods == ("DELETE",)

    def test_route_order_kept(self):
        routes = routes_parse(
            '<routes>'
            '<route path="/one" file="1.html"><method>GET</method></route>'
            '<route path="/two" file="2.html"><method>GET</method></route>'
            "</routes>"
        )
        assert [entry.path for entry in routes] == ["/one", "/two"]

    def test_missing_attribute(self):
        with pytest.raises(RouteConfigError, match="path"):
            routes_parse('<routes><route file="a.html"><method>GET</method></route></routes>')

    def test_malformed_xml(self):
        with pytest.raises(RouteConfigError):
            routes_parse("<routes><route")


class TestLoad:
    """Test file loading and degradation"""

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(RouteConfigError):
            routes_load(tmp_path / "absent.xml")

    def test_missing_file_degrades_to_empty(self, tmp_path):
        routes = routes_loadOrEmpty(tmp_path / "absent.xml")
        assert routes == RouteTable.empty()
        assert len(routes) == 0

    def test_malformed_file_degrades_to_empty(self, tmp_path):
        path = tmp_path / "routes.xml"
        path.write_text("not xml at all", encoding="utf-8")
        assert len(routes_loadOrEmpty(path)) == 0


class TestLiteral:
    """Test the embeddable plain-data form"""

    def test_as_literal(self, greet_routes):
        assert greet_routes.as_literal() == [
            {"path": "/greet", "file": "hello.html", "methods": ["GET"]}
        ]

    def test_from_literal(self, greet_routes):
        assert RouteTable.from_literal(greet_routes.as_literal()) == greet_routes
