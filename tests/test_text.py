import pytest

from core import text


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Acme Longevity, Inc.", "acme-longevity-inc"),
        ("  Hello   World  ", "hello-world"),
        ("a -- b", "a-b"),
        ("", ""),
    ],
)
def test_slugify(value, expected):
    assert text.slugify(value) == expected


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.example.com/about", "example.com"),
        ("example.org", "example.org"),
        ("http://sub.example.co.uk", "sub.example.co.uk"),
        ("", None),
        (None, None),
    ],
)
def test_extract_domain(url, expected):
    assert text.extract_domain(url) == expected


def test_email_domain():
    assert text.email_domain("Jane@Example.COM") == "example.com"
    assert text.email_domain("not-an-email") is None


def test_strip_html_decodes_entities_and_collapses_whitespace():
    assert text.strip_html("<p>Fish &amp; chips</p>\n\n<b>now</b>") == "Fish & chips now"


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "dQw4w9WgXcQ",
    ],
)
def test_extract_youtube_id(url):
    assert text.extract_youtube_id(url) == "dQw4w9WgXcQ"


def test_extract_youtube_id_rejects_other_urls():
    assert text.extract_youtube_id("https://vimeo.com/12345") is None
