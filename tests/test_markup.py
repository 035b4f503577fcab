"""Tests for HTML fragment assembly.

Verifies:
    - <img> with attributes in order, then src data URI
    - Optional wrapper with its own attributes, closed after the <img>
    - Wrapper attributes ignored when there is no wrapper
    - Duplicate attribute names kept
    - Values inserted verbatim (no escaping)

Run: pytest tests/test_markup.py -v
"""
from docima import markup


class TestDataUri:

    def test_png_data_uri(self):
        assert markup.data_uri("AAAA") == "data:image/png;base64,AAAA"

    def test_custom_mime(self):
        assert markup.data_uri("AAAA", "image/gif") == "data:image/gif;base64,AAAA"


class TestAssemble:

    def test_bare_img(self):
        assert markup.assemble("QUJD") == '<img src="data:image/png;base64,QUJD">'

    def test_attribute_order_preserved(self):
        frag = markup.assemble("QUJD", [("title", "t"), ("alt", "a"), ("id", "i")])
        assert frag == '<img title="t" alt="a" id="i" src="data:image/png;base64,QUJD">'

    def test_duplicate_names_kept(self):
        frag = markup.assemble("QUJD", [("class", "a"), ("class", "b")])
        assert frag.count('class="') == 2
        assert frag.index('class="a"') < frag.index('class="b"')

    def test_wrapper(self):
        frag = markup.assemble("QUJD", [("alt", "x")], "div", [("id", "w1")])
        assert frag == (
            '<div id="w1"><img alt="x" src="data:image/png;base64,QUJD"></div>'
        )

    def test_wrapper_without_attributes(self):
        frag = markup.assemble("QUJD", wrapper="span")
        assert frag == '<span><img src="data:image/png;base64,QUJD"></span>'

    def test_anchor_wrapper(self):
        frag = markup.assemble(
            "QUJD", (), "a", [("href", "https://www.python.org/"), ("target", "_blank")]
        )
        assert frag.startswith('<a href="https://www.python.org/" target="_blank"><img ')
        assert frag.endswith('></a>')

    def test_wrapper_attributes_ignored_without_wrapper(self):
        for wrapper in (None, ""):
            frag = markup.assemble("QUJD", (), wrapper, [("id", "w1")])
            assert frag == '<img src="data:image/png;base64,QUJD">'

    def test_values_not_escaped(self):
        frag = markup.assemble("QUJD", [("title", "a < b & c")])
        assert 'title="a < b & c"' in frag
