"""Pydantic models for Sanity newsletter documents."""

import re
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

EXTERNAL_LINK_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 datetime from the CMS, treating naive values as UTC.

    Returns:
        The aware datetime, or None when value is empty or does not parse.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Newsletter(BaseModel):
    """A newsletter issue as returned by the Sanity query API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    title: str | None = None
    summary: str | None = None
    publishDate: str | None = None
    slug: str | None = None
    link: str | None = None

    @field_validator("slug", mode="before")
    @classmethod
    def flatten_slug(cls, v: Any) -> Any:
        """Accept the raw ``{"current": ...}`` slug object of a full document."""
        if isinstance(v, dict):
            return v.get("current")
        return v

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"

    def resolved_url(self, base_url: str = "") -> str:
        """Return the URL readers should follow for this issue.

        An external ``http(s)://`` link wins; anything else falls back to the
        internal ``/newsletter/<slug>`` page, keyed by id when there is no slug.

        Args:
            base_url: Prefix for internal URLs. Empty gives a site-relative path.

        Returns:
            The external link or the internal newsletter URL.
        """
        if self.link and EXTERNAL_LINK_PATTERN.match(self.link):
            return self.link
        return f"{base_url}/newsletter/{self.slug or self.id}"
