"""Pipelines wiring the Sanity client to the page renderer and the RSS builder."""

import logging
from typing import Any

from sanity_newsletter.publisher import FeedWriter
from sanity_newsletter.render import RenderTarget, render_newsletters
from sanity_newsletter.rss import DEFAULT_FEED_DESCRIPTION, DEFAULT_FEED_TITLE, build_rss_feed
from sanity_newsletter.sanity_client import FILE_FEED_LIMIT, PAGE_LIMIT, SanityClient

logger = logging.getLogger(__name__)


def render_page(
    client: SanityClient | Any,
    target: RenderTarget,
    limit: int = PAGE_LIMIT,
) -> int:
    """Fetch the latest newsletters and render them into ``target``.

    Fetch failures are not raised: the page falls back to its placeholders.

    Args:
        client: SanityClient instance (or mock for testing).
        target: Where the latest-issue and archive markup is written.
        limit: Maximum number of newsletters to fetch.

    Returns:
        The number of newsletters rendered.
    """
    newsletters = client.fetch_newsletters(limit=limit)
    render_newsletters(newsletters, target)
    return len(newsletters)


def generate_feed(
    client: SanityClient | Any,
    writer: FeedWriter | Any,
    site_url: str,
    limit: int = FILE_FEED_LIMIT,
    title: str = DEFAULT_FEED_TITLE,
    description: str = DEFAULT_FEED_DESCRIPTION,
) -> dict[str, Any]:
    """Fetch newsletters, build the RSS feed and write it out.

    Args:
        client: SanityClient instance (or mock for testing).
        writer: FeedWriter instance (or mock for testing).
        site_url: Base URL for channel and item links.
        limit: Maximum number of newsletters in the feed.
        title: Channel title.
        description: Channel description.

    Returns:
        Dictionary with 'items_written' and 'output_path'.

    Raises:
        SanityAPIError: If the newsletters cannot be fetched.
        FeedWriteError: If the feed cannot be written.
    """
    newsletters = client.query(limit=limit)
    document = build_rss_feed(newsletters, site_url, title=title, description=description)
    output_path = writer.write(document)

    logger.info("Generated feed with %d items", len(newsletters))

    return {
        "items_written": len(newsletters),
        "output_path": str(output_path),
    }
