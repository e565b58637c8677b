"""Tests for pagesync.templates."""

from pagesync.templates import render_index, render_page


class TestRenderPage:
    def test_name_used_as_title_heading_and_body(self):
        page = render_page("apple.html")
        assert "<title>apple.html</title>" in page
        assert "<h1>apple.html</h1>" in page
        assert "Content for apple.html goes here." in page

    def test_links_home(self):
        assert '<a href="/">Home</a>' in render_page("apple.html")

    def test_escapes_markup_in_name(self):
        page = render_page("<b>&.html")
        assert "<b>" not in page
        assert "&lt;b&gt;&amp;.html" in page

    def test_no_escape_keeps_raw_name(self):
        page = render_page("<b>.html", escape=False)
        assert "<title><b>.html</title>" in page


class TestRenderIndex:
    def test_heading_is_upper_cased_key(self):
        assert "<h1>A</h1>" in render_index("a", [])

    def test_nav_links(self):
        index = render_index("a", [])
        assert '<a href="/">Home</a>' in index
        assert '<a href="/about.html">About</a>' in index
        assert '<a href="/contact.html">Contact</a>' in index

    def test_links_sorted_and_deduplicated(self):
        index = render_index("a", ["b.html", "a.html", "b.html"])
        assert index.count("<li>") == 2
        assert index.index('href="a.html"') < index.index('href="b.html"')
        assert '<li><a href="a.html">a.html</a></li>' in index

    def test_empty_list(self):
        index = render_index("c", [])
        assert "<ul>" in index
        assert "<li>" not in index

    def test_href_percent_encodes_name(self):
        index = render_index("a", ['say"hi".html'])
        assert 'href="say%22hi%22.html"' in index
        assert ">say&quot;hi&quot;.html</a>" in index

    def test_href_keeps_url_specials_in_file_name(self):
        index = render_index("a", ["q&a #1?.html", "100%.html"])
        assert 'href="q%26a%20%231%3F.html"' in index
        assert 'href="100%25.html"' in index
        assert ">q&amp;a #1?.html</a>" in index

    def test_no_escape_keeps_raw_href(self):
        index = render_index("a", ["a b.html"], escape=False)
        assert '<a href="a b.html">a b.html</a>' in index
