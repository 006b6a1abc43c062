"""Command-line interface for the newsletter feed scripts."""

import logging
import sys
from pathlib import Path

import click

from sanity_newsletter.config import Config
from sanity_newsletter.exceptions import FeedWriteError, SanityAPIError
from sanity_newsletter.orchestrator import generate_feed, render_page
from sanity_newsletter.publisher import FeedWriter
from sanity_newsletter.render import HtmlPageTarget
from sanity_newsletter.sanity_client import FILE_FEED_LIMIT, PAGE_LIMIT, SanityClient


def _load_config() -> Config:
    try:
        return Config()
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Render Sanity newsletters into pages and RSS feeds."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


@main.command("generate-rss")
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    help="Where to write the feed (defaults to RSS_OUTPUT_PATH).",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=FILE_FEED_LIMIT,
    show_default=True,
    help="Maximum number of newsletters in the feed.",
)
def generate_rss(output: str | None, limit: int) -> None:
    """Fetch newsletters and write the RSS feed to a file."""
    config = _load_config()

    try:
        client = SanityClient(config)
        writer = FeedWriter(output or config.rss_output_path)

        result = generate_feed(
            client=client,
            writer=writer,
            site_url=config.site_url,
            limit=limit,
            title=config.feed_title,
            description=config.feed_description,
        )

        click.echo(f"RSS feed generated successfully: {result['items_written']} items written to {result['output_path']}")

    except SanityAPIError as e:
        click.echo(f"Sanity API error: {e}", err=True)
        sys.exit(1)

    except FeedWriteError as e:
        click.echo(f"Writing feed failed: {e}", err=True)
        sys.exit(1)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)


@main.command("render-page")
@click.argument("page", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    help="Where to write the rendered page (defaults to overwriting PAGE).",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=PAGE_LIMIT,
    show_default=True,
    help="Maximum number of newsletters to show.",
)
def render_page_command(page: str, output: str | None, limit: int) -> None:
    """Fill the latest-issue and archive containers of PAGE.

    PAGE: A static HTML page with the newsletter containers.
    """
    config = _load_config()

    try:
        target = HtmlPageTarget(Path(page).read_text(encoding="utf-8"))
        count = render_page(SanityClient(config), target, limit=limit)
        Path(output or page).write_text(str(target), encoding="utf-8")

        click.echo(f"Rendered {count} newsletters into {output or page}")

    except OSError as e:
        click.echo(f"Rendering page failed: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
