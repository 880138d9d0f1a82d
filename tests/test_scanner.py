"""
Tag scanner tests

Checks the three directive grammars and that everything else is left alone.
"""

from tagpress.lib.scanner import directives_find, directives_scan, directives_substitute
from tagpress.models.directives import DirectiveKind


class TestIncludeForm:
    """Test <%@include file="..." %> matching"""

    def test_include_payload_is_path(self):
        """Captured payload is the quoted path"""
        found = list(directives_scan('<%@include file="partials/a.html" %>', DirectiveKind.INCLUDE))

        assert len(found) == 1
        assert found[0].payload == "partials/a.html"
        assert found[0].source == '<%@include file="partials/a.html" %>'
        assert found[0].position == 0

    def test_include_without_trailing_space(self):
        found = list(directives_scan('<%@include file="a.html"%>', DirectiveKind.INCLUDE))
        assert [d.payload for d in found] == ["a.html"]

    def test_unquoted_include_is_not_an_include(self):
        """Malformed include grammar is not matched as include"""
        found = list(directives_scan("<%@include file=a.html %>", DirectiveKind.INCLUDE))
        assert found == []


class TestCodeAndOutputForms:
    """Test <% %> and <%= %> matching"""

    def test_code_block_payload(self):
        found = list(directives_scan('<% x = "1" %>', DirectiveKind.CODE_BLOCK))

        assert len(found) == 1
        assert found[0].payload.strip() == 'x = "1"'

    def test_output_is_not_a_code_block(self):
        """A body starting with '=' belongs to the output form"""
        assert list(directives_scan("<%= x %>", DirectiveKind.CODE_BLOCK)) == []

    def test_output_payload(self):
        found = list(directives_scan("Hi <%= name %>!", DirectiveKind.OUTPUT))

        assert len(found) == 1
        assert found[0].payload.strip() == "name"
        assert found[0].position == 3

    def test_unterminated_tag_left_alone(self):
        text = "50% off <% not closed"
        assert directives_find(text) == []


class TestSubstitution:
    """Test directives_substitute and directives_find"""

    def test_text_outside_matches_untouched(self):
        text = "<p>a</p><%= x %><p>b</p><%= y %>"
        result = directives_substitute(
            text, DirectiveKind.OUTPUT, lambda d: d.payload.strip().upper()
        )
        assert result == "<p>a</p>X<p>b</p>Y"

    def test_replacement_not_rescanned(self):
        """Handler output is not scanned again in the same pass"""
        result = directives_substitute("<%= a %>", DirectiveKind.OUTPUT, lambda d: "<%= b %>")
        assert result == "<%= b %>"

    def test_find_orders_by_position(self):
        text = '<%= out %><% a = "1" %>'
        kinds = [d.kind for d in directives_find(text)]
        assert kinds == [DirectiveKind.OUTPUT, DirectiveKind.CODE_BLOCK]
