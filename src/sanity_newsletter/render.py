"""HTML rendering of the latest issue card and the archive list.

The renderer never touches a page directly. It writes markup through a
``RenderTarget``, which lets the same code fill an in-memory mapping in
tests or the containers of a static HTML page at build time.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from bs4 import BeautifulSoup

from sanity_newsletter.models import Newsletter, parse_iso_datetime

logger = logging.getLogger(__name__)

LATEST_CONTAINER = "latest-issue-container"
ARCHIVE_CONTAINER = "archive-container"

COMING_SOON_CARD = """
<div class="card">
  <h3>Coming Soon</h3>
  <p class="muted">Stay tuned for our next newsletter issue.</p>
</div>
"""

NO_PAST_ISSUES = '<p class="muted">No past issues yet.</p>'


class RenderTarget(Protocol):
    """Somewhere rendered markup can be placed, addressed by container id."""

    def set_content(self, container_id: str, markup: str) -> bool:
        """Replace the content of a container.

        Returns:
            False if the container does not exist, True otherwise.
        """
        ...


class MemoryTarget:
    """Render target backed by a dict, for tests and dry runs."""

    def __init__(self, container_ids: Sequence[str] = (LATEST_CONTAINER, ARCHIVE_CONTAINER)) -> None:
        self.contents: dict[str, str | None] = {cid: None for cid in container_ids}

    def set_content(self, container_id: str, markup: str) -> bool:
        if container_id not in self.contents:
            return False
        self.contents[container_id] = markup
        return True


class HtmlPageTarget:
    """Render target that fills elements of a static HTML page by ``id``."""

    def __init__(self, page_html: str) -> None:
        self._soup = BeautifulSoup(page_html, "html.parser")

    def set_content(self, container_id: str, markup: str) -> bool:
        element = self._soup.find(id=container_id)
        if element is None:
            return False
        element.clear()
        element.append(BeautifulSoup(markup, "html.parser"))
        return True

    def __str__(self) -> str:
        return str(self._soup)


def format_date(value: str | None) -> str:
    """Format an ISO-8601 date string as e.g. ``Sep 3, 2025``.

    Strings that do not parse are returned unchanged.
    """
    if not value:
        return ""
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return value
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def render_latest(issue: Newsletter | None) -> str:
    """Render the card for the most recent issue, or a placeholder."""
    if issue is None:
        return COMING_SOON_CARD

    summary = f"<p>{issue.summary}</p>" if issue.summary else ""
    return f"""
<div class="card">
  <h3>{issue.display_title}</h3>
  <p class="muted">{format_date(issue.publishDate)}</p>
  {summary}
  <a href="{issue.resolved_url()}" class="btn" style="margin-top: 16px;">Read more</a>
</div>
"""


def render_archive(issues: Sequence[Newsletter]) -> str:
    """Render one archive entry per issue, keeping the given order."""
    if not issues:
        return NO_PAST_ISSUES

    items = [
        f"""
<div class="archive-item">
  <a href="{issue.resolved_url()}">{issue.display_title}</a>
  <span class="muted">{format_date(issue.publishDate)}</span>
</div>
"""
        for issue in issues
    ]
    return "".join(items)


def render_newsletters(records: Sequence[Newsletter], target: RenderTarget) -> None:
    """Fill the latest-issue and archive containers from ``records``.

    The first record is the latest issue, the rest form the archive.
    Missing containers are skipped.
    """
    latest = records[0] if records else None
    archive = list(records[1:])

    if not target.set_content(LATEST_CONTAINER, render_latest(latest)):
        logger.debug("No %r container on the page, skipping", LATEST_CONTAINER)
    if not target.set_content(ARCHIVE_CONTAINER, render_archive(archive)):
        logger.debug("No %r container on the page, skipping", ARCHIVE_CONTAINER)
