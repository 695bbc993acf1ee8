"""
Tests for doclink.render.resolver - word and name resolution.
"""

from doclink.render import IdentifierResolver, is_predeclared


def _resolver(**kwargs):
    kwargs.setdefault("namespaces", {"np": "numpy", "os": "os"})
    kwargs.setdefault("anchor_targets", frozenset({"Circle", "Circle.area", "SCALE"}))
    return IdentifierResolver(**kwargs)


class TestToURL:
    """Tests for IdentifierResolver.to_url()."""

    def test_package_and_symbol(self):
        """A symbol URL is the package URL plus a fragment."""
        assert _resolver().to_url("numpy", "array") == "/numpy#array"

    def test_package_only(self):
        """Without a symbol the package URL is returned."""
        assert _resolver().to_url("numpy") == "/numpy"

    def test_empty_path_is_page_relative(self):
        """An empty path gives a page-relative fragment."""
        assert _resolver().to_url("", "Circle") == "#Circle"

    def test_custom_package_url(self):
        """package_url builds the base of the URL."""
        r = _resolver(package_url=lambda path: f"https://docs.example.com/{path}/")
        assert r.to_url("numpy", "array") == "https://docs.example.com/numpy/#array"


class TestToHTML:
    """Tests for IdentifierResolver.to_html()."""

    def test_namespace_member(self):
        """ns.member links the namespace and the member."""
        assert _resolver().to_html("np.array") == (
            '<a href="/numpy">np</a>.<a href="/numpy#array">array</a>'
        )

    def test_anchor_target(self):
        """Page anchor targets link to their fragment."""
        assert _resolver().to_html("Circle") == '<a href="#Circle">Circle</a>'

    def test_dotted_anchor_target(self):
        """Dotted anchor targets link whole."""
        assert _resolver().to_html("Circle.area") == '<a href="#Circle.area">Circle.area</a>'

    def test_member_of_current_declaration(self):
        """with_members() links members of the current declaration."""
        r = _resolver().with_members({"radius": "Circle.radius"})
        assert r.to_html("radius") == '<a href="#Circle.radius">radius</a>'

    def test_members_do_not_leak(self):
        """with_members() leaves the original resolver unchanged."""
        r = _resolver()
        r.with_members({"radius": "Circle.radius"})
        assert r.to_html("radius") == "radius"

    def test_imported_symbol(self):
        """Imported symbols link to their module page."""
        r = _resolver(symbols={"Path": ("pathlib", "Path")})
        assert r.to_html("Path") == '<a href="/pathlib#Path">Path</a>'

    def test_builtin(self):
        """Builtins link to the builtins page."""
        assert _resolver().to_html("len") == '<a href="/builtins#len">len</a>'

    def test_page_declaration_shadows_builtin(self):
        """A page declaration wins over a builtin of the same name."""
        r = _resolver(anchor_targets=frozenset({"open"}))
        assert r.to_html("open") == '<a href="#open">open</a>'

    def test_unknown_word(self):
        """Unknown words are returned escaped."""
        assert _resolver().to_html("widget") == "widget"

    def test_unknown_dotted_word(self):
        """Dotted words with an unknown head are not linked."""
        assert _resolver().to_html("self.radius") == "self.radius"


class TestPredeclared:
    """Tests for is_predeclared()."""

    def test_builtin_functions_and_types(self):
        """Builtin functions, types and exceptions are predeclared."""
        assert is_predeclared("len")
        assert is_predeclared("int")
        assert is_predeclared("ValueError")

    def test_private_and_unknown(self):
        """Dunder builtins and unknown names are not predeclared."""
        assert not is_predeclared("__import__")
        assert not is_predeclared("widget")
