"""
Markdown, XML and zip output tests.
"""

import io
import xml.etree.ElementTree as ET
import zipfile

from devdocs_llm.crawler.models import PageResult
from devdocs_llm.output import build_archive, escape_xml, to_markdown, to_xml
from devdocs_llm.output.formatter import markdown_lines_to_xml
from devdocs_llm.utils.paths import page_filename, url_to_slug


def test_markdown_has_one_header_per_page_in_order(pages):
    markdown = to_markdown(pages)

    headers = [line[2:] for line in markdown.split("\n") if line.startswith("# https://")]
    assert headers == [page.url for page in pages]


def test_markdown_page_layout():
    markdown = to_markdown([PageResult(url="https://a.dev", content="Body")])

    assert markdown == "# https://a.dev\n\nBody\n\n---\n\n"


def test_markdown_of_nothing_is_empty():
    assert to_markdown([]) == ""


def test_escape_xml_handles_all_five_characters():
    assert escape_xml("<a href=\"x\">Tom & Jerry's</a>") == (
        "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&apos;s&lt;/a&gt;"
    )


def test_markdown_lines_to_xml_structure():
    content = "\n".join([
        "# Title",
        "###### Small",
        "Intro text",
        "",
        "- first",
        "  * nested",
        "```python",
        "# not a heading",
        "```",
        "####### too deep",
    ])

    assert markdown_lines_to_xml(content) == [
        "<h1>Title</h1>",
        "<h6>Small</h6>",
        "<p>Intro text</p>",
        "",
        "<li>first</li>",
        "<li>nested</li>",
        "<code>",
        "# not a heading",
        "</code>",
        "<p>####### too deep</p>",
    ]


def test_unclosed_fence_is_closed():
    assert markdown_lines_to_xml("```\ncode") == ["<code>", "code", "</code>"]


def test_xml_escapes_content_and_is_well_formed():
    pages = [
        PageResult(
            url="https://docs.example.com/search?q=a&b=<c>",
            content="# Tips & Tricks\n\nUse `a < b` and \"quotes\".\n\n```\nif x > 1 && y:\n```\n- item 'one'",
        ),
        PageResult(url="https://docs.example.com/plain", content="Just text."),
    ]

    xml = to_xml(pages)
    root = ET.fromstring(xml.encode("utf-8"))

    assert root.tag == "document"
    assert [node.findtext("url") for node in root.findall("page")] == [page.url for page in pages]
    body = xml.split("<document>", 1)[1]
    for raw in ("Tips & Tricks", "a < b", "x > 1"):
        assert raw not in body
    assert "<h1>Tips &amp; Tricks</h1>" in xml
    assert "<li>item &apos;one&apos;</li>" in xml


def test_slug_and_filenames():
    assert url_to_slug("https://Docs.Example.com/A_b?x=1") == "https---docs-example-com-a-b-x-1"
    assert page_filename(0, "https://a.dev") == "1-https---a-dev.md"


def test_archive_has_one_file_per_page(pages):
    data = build_archive(pages)

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        names = archive.namelist()
        assert names == [f"docs/{page_filename(i, page.url)}" for i, page in enumerate(pages)]
        assert len(set(names)) == len(pages)
        assert archive.read(names[0]).decode("utf-8") == "# https://docs.example.com/\n\n# Welcome\n\nStart here.\n"
        assert archive.getinfo(names[0]).compress_type == zipfile.ZIP_DEFLATED


def test_archive_names_are_deterministic(pages):
    first = zipfile.ZipFile(io.BytesIO(build_archive(pages))).namelist()
    second = zipfile.ZipFile(io.BytesIO(build_archive(pages))).namelist()

    assert first == second


def test_archive_names_differ_for_urls_with_same_slug():
    pages = [PageResult(url="https://a.dev/x-y", content="1"), PageResult(url="https://a.dev/x_y", content="2")]

    with zipfile.ZipFile(io.BytesIO(build_archive(pages))) as archive:
        assert len(set(archive.namelist())) == 2


def test_xml_drops_control_characters():
    pages = [PageResult(url="https://docs.example.com/\x0cpage", content="a\x0cb\x00c\td\x1f")]

    xml = to_xml(pages)
    root = ET.fromstring(xml.encode("utf-8"))

    assert root.find("page").findtext("url") == "https://docs.example.com/page"
    assert "<p>abc\td</p>" in xml
    assert escape_xml("tab\tnewline\ncr\r") == "tab\tnewline\ncr\r"
