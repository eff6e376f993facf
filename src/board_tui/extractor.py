from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .datamodels import Row

logger = logging.getLogger("board")

ROW_SELECTOR = ".symph_row"
TITLE_SELECTOR = ".subject_fixed"
LINK_SELECTOR = ".list_subject"
COMMENT_COUNT_SELECTOR = ".rSymph05"
NICKNAME_SELECTOR = ".list_author .nickname"
AUTHOR_IMAGE_SELECTOR = ".list_author img"
VIEW_COUNT_SELECTOR = ".list_hit .hit"
TIMESTAMP_SELECTOR = ".list_time .timestamp"


def extract(markup: str) -> List[Row]:
    """Turn a board listing page into rows, in the order they appear.

    Rows missing a required field are skipped; a malformed row never stops
    the rest of the page from being extracted.
    """
    soup = BeautifulSoup(markup, "lxml")
    rows: List[Row] = []
    for position, container in enumerate(soup.select(ROW_SELECTOR)):
        row = _extract_row(container)
        if row is None:
            logger.debug("Skipping row %d: missing a required field", position)
            continue
        rows.append(row)
    logger.debug("Extracted %d rows", len(rows))
    return rows


def _extract_row(container: Tag) -> Optional[Row]:
    title = _text(container.select_one(TITLE_SELECTOR))
    url = _href(container.select_one(LINK_SELECTOR))
    author = _author(container)
    view_count = _text(container.select_one(VIEW_COUNT_SELECTOR))
    timestamp = _text(container.select_one(TIMESTAMP_SELECTOR))
    if not title or not url or not author:
        return None
    if view_count is None or timestamp is None:
        return None
    return Row(
        title=title,
        url=url,
        comment_count=_comment_count(container),
        author=author,
        view_count=view_count,
        timestamp=timestamp,
    )


def _text(node: Optional[Tag]) -> Optional[str]:
    if node is None:
        return None
    # Layout newlines and tabs go; spaces between inline elements stay.
    return node.get_text().replace("\n", "").replace("\t", "").strip()


def _href(node: Optional[Tag]) -> Optional[str]:
    if node is None:
        return None
    href = node.get("href")
    if not isinstance(href, str):
        return None
    return href.strip() or None


def _comment_count(container: Tag) -> int:
    text = _text(container.select_one(COMMENT_COUNT_SELECTOR))
    if not text:
        return 0
    try:
        count = int(text.replace(",", ""))
    except ValueError:
        logger.debug("Unparsable comment count %r, using 0", text)
        return 0
    return max(count, 0)


def _author(container: Tag) -> Optional[str]:
    nickname = _text(container.select_one(NICKNAME_SELECTOR))
    if nickname:
        return nickname
    # Avatar-only authors carry their name in the image alt text.
    image = container.select_one(AUTHOR_IMAGE_SELECTOR)
    if image is None:
        return None
    alt = image.get("alt")
    if not isinstance(alt, str):
        return None
    return alt.strip() or None
