import pytest

from proxy_tab.rewriting.metadata import extract_metadata

URL = "https://example.com/articles/1?ref=home"


class TestTitle:
    def test_og_title_wins(self):
        html = (
            '<html><head><meta property="og:title" content="  Open Graph  ">'
            "<title>Plain</title></head></html>"
        )
        assert extract_metadata(html, URL).title == "Open Graph"

    def test_title_element_is_used_without_og(self):
        html = "<html><head><title>\n  Plain Title \n</title></head></html>"
        assert extract_metadata(html, URL).title == "Plain Title"

    def test_blank_og_title_falls_back_to_title(self):
        html = '<meta property="og:title" content=" "><title>Plain</title>'
        assert extract_metadata(html, URL).title == "Plain"

    def test_request_url_is_last_resort(self):
        result = extract_metadata("<p>no title</p>", URL, fallback_title="https://short/")
        assert result.title == "https://short/"

    def test_base_url_when_no_fallback_given(self):
        assert extract_metadata("<title>  </title>", URL).title == URL


class TestFavicon:
    def test_icon_is_resolved_against_base(self):
        html = '<link rel="icon" href="/static/fav.png">'
        assert extract_metadata(html, URL).favicon == "https://example.com/static/fav.png"

    def test_icon_precedence(self):
        html = (
            '<link rel="apple-touch-icon" href="/apple.png">'
            '<link rel="shortcut icon" href="/shortcut.ico">'
            '<link rel="icon" href="/icon.png">'
        )
        assert extract_metadata(html, URL).favicon == "https://example.com/icon.png"

    def test_shortcut_icon_before_apple_touch_icon(self):
        html = (
            '<link rel="apple-touch-icon" href="/apple.png">'
            '<link rel="Shortcut Icon" href="/shortcut.ico">'
        )
        assert extract_metadata(html, URL).favicon == "https://example.com/shortcut.ico"

    def test_apple_touch_icon_is_last_link_choice(self):
        html = '<link rel="apple-touch-icon" href="touch.png">'
        assert (
            extract_metadata(html, URL).favicon
            == "https://example.com/articles/touch.png"
        )

    def test_unresolvable_icon_gives_none(self):
        html = '<link rel="icon" href="data:image/x-icon;base64,AAAB">'
        assert extract_metadata(html, URL).favicon is None

    def test_origin_favicon_is_synthesized(self):
        assert extract_metadata("", "https://example.com:8443/deep/page").favicon == (
            "https://example.com:8443/favicon.ico"
        )

    @pytest.mark.parametrize("base", ["not a url", "", "file:///tmp/x.html"])
    def test_unusable_base_gives_no_favicon(self, base):
        assert extract_metadata("", base, fallback_title="x").favicon is None


def test_page_without_title_or_icon():
    result = extract_metadata("<html><body>hi</body></html>", URL, fallback_title=URL)
    assert result.model_dump() == {
        "title": URL,
        "favicon": "https://example.com/favicon.ico",
    }


class TestEncoding:
    def test_bytes_decoded_from_meta_charset(self):
        html = b'<head><meta charset="iso-8859-1"><title>Se\xf1or</title></head>'
        assert extract_metadata(html, URL).title == "Señor"

    def test_header_encoding_is_used(self):
        html = "<title>über</title>".encode("utf-8")
        assert extract_metadata(html, URL, encoding="utf-8").title == "über"

    def test_blank_bytes_fall_back(self):
        assert extract_metadata(b"  ", URL).title == URL
