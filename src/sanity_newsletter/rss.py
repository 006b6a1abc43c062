"""RSS 2.0 feed generation for newsletter issues."""

from collections.abc import Sequence
from datetime import datetime, timezone
from email.utils import format_datetime
from xml.sax.saxutils import escape

from sanity_newsletter.models import Newsletter, parse_iso_datetime

CDATA_END = "]]>"
CDATA_END_ESCAPED = "]]]]><![CDATA[>"

DEFAULT_FEED_TITLE = "Paceflow Newsletter"
DEFAULT_FEED_DESCRIPTION = "Latest newsletters and product updates from Paceflow"


def escape_cdata(text: str) -> str:
    """Split every ``]]>`` so the text cannot close its CDATA section early."""
    return str(text).replace(CDATA_END, CDATA_END_ESCAPED)


def format_pub_date(value: str | None, now: datetime | None = None) -> str:
    """Format a publish date as RFC-1123 in GMT.

    Args:
        value: ISO-8601 datetime string from the CMS.
        now: Generation time used when value is missing or unparseable.

    Returns:
        A date like ``Wed, 03 Sep 2025 00:00:00 GMT``.
    """
    parsed = parse_iso_datetime(value)
    if parsed is None:
        parsed = now or datetime.now(timezone.utc)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
    return format_datetime(parsed.astimezone(timezone.utc), usegmt=True)


def build_rss_item(record: Newsletter, base_url: str, now: datetime | None = None) -> str:
    title = escape_cdata(record.title) if record.title else "Untitled"
    summary = escape_cdata(record.summary) if record.summary else ""
    return (
        "\n      <item>"
        f"\n        <title><![CDATA[{title}]]></title>"
        f"\n        <link>{escape(record.resolved_url(base_url))}</link>"
        f'\n        <guid isPermaLink="false">{escape(record.id)}</guid>'
        f"\n        <pubDate>{format_pub_date(record.publishDate, now)}</pubDate>"
        f"\n        <description><![CDATA[{summary}]]></description>"
        "\n      </item>"
    )


def build_rss_feed(
    records: Sequence[Newsletter],
    base_url: str,
    title: str = DEFAULT_FEED_TITLE,
    description: str = DEFAULT_FEED_DESCRIPTION,
    now: datetime | None = None,
) -> str:
    """Build an RSS 2.0 document with one item per newsletter.

    Args:
        records: Newsletters in the order they should appear.
        base_url: Site URL used for the channel link and internal item links.
        title: Channel title.
        description: Channel description.
        now: Timestamp used for items without a publish date.

    Returns:
        The feed as a UTF-8 XML document string.
    """
    base_url = base_url.rstrip("/")
    items = "".join(build_rss_item(record, base_url, now) for record in records)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0">\n'
        "  <channel>\n"
        f"    <title>{escape(title)}</title>\n"
        f"    <link>{escape(base_url)}/newsletter</link>\n"
        f"    <description>{escape(description)}</description>"
        f"{items}\n"
        "  </channel>\n"
        "</rss>"
    )
