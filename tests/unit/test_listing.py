from __future__ import annotations

import re
from pathlib import Path

from serve.listing import DIR_ICON, FILE_ICON, child_href, list_children, render_listing


def _hrefs(html: str) -> list[str]:
    return re.findall(r"<a href='([^']*)'>", html)


def test_children_sorted_by_name(tmp_path: Path) -> None:
    for name in ("b", "index.html", "a", "B", "_x"):
        (tmp_path / name).write_text("", encoding="utf-8")
    assert [name for name, _ in list_children(tmp_path)] == ["B", "_x", "a", "b", "index.html"]


def test_root_listing_links(tmp_path: Path) -> None:
    (tmp_path / "a").write_text("", encoding="utf-8")
    (tmp_path / "b").mkdir()
    (tmp_path / "index.html").write_text("", encoding="utf-8")

    html = render_listing(tmp_path, "/")

    assert _hrefs(html) == ["/a", "/b", "/index.html"]
    assert f"<h2>{DIR_ICON} {tmp_path}</h2>" in html
    assert f"<li>{FILE_ICON} <a href='/a'>a</a></li>" in html
    assert f"<li>{DIR_ICON} <a href='/b'>b</a></li>" in html


def test_listing_is_not_recursive(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "deep.txt").write_text("", encoding="utf-8")
    assert _hrefs(render_listing(tmp_path, "/")) == ["/sub"]


def test_links_keep_the_encoded_request_path() -> None:
    assert child_href("/my%20dir/", "file.txt") == "/my%20dir/file.txt"
    assert child_href("/my%20dir///", "x") == "/my%20dir/x"
    assert child_href("/", "x") == "/x"


def test_names_are_not_html_escaped(tmp_path: Path) -> None:
    (tmp_path / "a&b<c>.txt").write_text("", encoding="utf-8")
    html = render_listing(tmp_path, "/dir")
    assert "<a href='/dir/a&b<c>.txt'>a&b<c>.txt</a>" in html


def test_empty_directory_renders_empty_list(tmp_path: Path) -> None:
    html = render_listing(tmp_path, "/")
    assert html.endswith("<ul></ul></body></html>")


def test_unreadable_directory_renders_empty_list(tmp_path: Path) -> None:
    html = render_listing(tmp_path / "gone", "/gone")
    assert "<ul></ul>" in html
