from __future__ import annotations

import pytest

from board_tui.datamodels import Row
from board_tui.extractor import extract


def make_row(
    title="Test Post",
    href="/service/board/park/1001",
    comments="3",
    nickname="tester",
    avatar_alt=None,
    hit="1.2 k",
    timestamp="12:34",
):
    """Build one listing row shaped like the board's markup."""
    parts = ['<div class="list_item symph_row">']
    if comments is not None:
        parts.append(
            f'<div class="list_reply reply_symph"><span class="rSymph05">{comments}</span></div>'
        )
    if href is not None:
        parts.append(f'<a class="list_subject" href="{href}">')
    else:
        parts.append('<div class="list_subject">')
    if title is not None:
        parts.append(f'<span class="subject_fixed" title="{title}">\n\t\t{title}\n\t</span>')
    parts.append("</a>" if href is not None else "</div>")
    parts.append('<div class="list_author">')
    if nickname is not None:
        parts.append(f'<span class="nickname">\n\t{nickname}\n</span>')
    if avatar_alt is not None:
        parts.append(f'<span class="nickimg"><img src="/n.png" alt="{avatar_alt}"></span>')
    parts.append("</div>")
    if hit is not None:
        parts.append(f'<div class="list_hit"><span class="hit">{hit}</span></div>')
    if timestamp is not None:
        parts.append(
            '<div class="list_time"><span class="time popover">'
            f'<span class="timestamp">{timestamp}</span></span></div>'
        )
    parts.append("</div>")
    return "".join(parts)


def page(*rows):
    return (
        "<html><body><div class='list_content'>"
        + "\n".join(rows)
        + "</div></body></html>"
    )


def test_extract_complete_rows_in_document_order():
    markup = page(
        make_row(title="First", href="/p/1", comments="10", nickname="alice"),
        make_row(title="Second", href="/p/2", comments="0", nickname="bob"),
        make_row(title="Third", href="/p/3", comments="7", nickname="carol"),
    )
    rows = extract(markup)
    assert [r.title for r in rows] == ["First", "Second", "Third"]
    assert rows[0] == Row(
        title="First",
        url="/p/1",
        comment_count=10,
        author="alice",
        view_count="1.2 k",
        timestamp="12:34",
    )
    assert rows[2].comment_count == 7


def test_extract_strips_whitespace_from_fields():
    rows = extract(page(make_row(title="Spaced out", nickname="someone")))
    assert rows[0].title == "Spaced out"
    assert rows[0].author == "someone"


def test_text_split_across_inline_elements_keeps_spaces():
    row = make_row(title="placeholder").replace(
        "\n\t\tplaceholder\n\t", "\n\t\tHello <b>big</b> world\n\t"
    )
    rows = extract(page(row))
    assert rows[0].title == "Hello big world"


def test_missing_comment_marker_defaults_to_zero():
    rows = extract(page(make_row(comments=None)))
    assert len(rows) == 1
    assert rows[0].comment_count == 0


@pytest.mark.parametrize("text", ["", "n/a", "-4", "  "])
def test_unparsable_comment_count_defaults_to_zero(text):
    rows = extract(page(make_row(comments=text)))
    assert len(rows) == 1
    assert rows[0].comment_count == 0


def test_comment_count_tolerates_thousands_separator():
    rows = extract(page(make_row(comments="1,024")))
    assert rows[0].comment_count == 1024


def test_empty_nickname_falls_back_to_avatar_alt():
    rows = extract(page(make_row(nickname="   ", avatar_alt="anon42")))
    assert len(rows) == 1
    assert rows[0].author == "anon42"


def test_missing_nickname_node_falls_back_to_avatar_alt():
    rows = extract(page(make_row(nickname=None, avatar_alt=" anon42 ")))
    assert rows[0].author == "anon42"


def test_row_without_any_author_is_dropped():
    markup = page(
        make_row(title="Kept"),
        make_row(title="Nameless", nickname="", avatar_alt=None),
    )
    rows = extract(markup)
    assert [r.title for r in rows] == ["Kept"]


def test_row_missing_subject_link_is_dropped():
    markup = page(
        make_row(title="One", href="/p/1"),
        make_row(title="No link", href=None),
        make_row(title="Three", href="/p/3"),
    )
    rows = extract(markup)
    assert [r.title for r in rows] == ["One", "Three"]
    assert [r.url for r in rows] == ["/p/1", "/p/3"]


@pytest.mark.parametrize(
    "missing", [{"title": None}, {"hit": None}, {"timestamp": None}]
)
def test_row_missing_required_field_is_dropped(missing):
    markup = page(make_row(title="Good"), make_row(**{"title": "Bad", **missing}))
    rows = extract(markup)
    assert [r.title for r in rows] == ["Good"]


def test_fields_do_not_leak_between_rows():
    # The second row has no comment marker; it must not pick up the first row's.
    markup = page(
        make_row(title="With comments", comments="42"),
        make_row(title="Without comments", comments=None),
    )
    rows = extract(markup)
    assert rows[0].comment_count == 42
    assert rows[1].comment_count == 0


def test_extract_handles_pages_without_rows():
    assert extract("") == []
    assert extract("<html><body><p>maintenance</p></body></html>") == []


def test_extract_ignores_non_row_markup():
    markup = page(make_row(title="Real")) + "<div class='subject_fixed'>stray</div>"
    rows = extract(markup)
    assert [r.title for r in rows] == ["Real"]
