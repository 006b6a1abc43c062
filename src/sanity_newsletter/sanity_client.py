"""Sanity API client for reading newsletter documents."""

import logging

import httpx
from pydantic import ValidationError

from sanity_newsletter.config import Config
from sanity_newsletter.exceptions import SanityAPIError
from sanity_newsletter.models import Newsletter

logger = logging.getLogger(__name__)

PAGE_LIMIT = 10
HTTP_FEED_LIMIT = 20
FILE_FEED_LIMIT = 100

NEWSLETTER_QUERY = """*[_type == "newsletter"] | order(publishDate desc)[0...{limit}]{{
  _id,
  title,
  summary,
  publishDate,
  "slug": slug.current,
  link
}}"""


def build_query(limit: int) -> str:
    """Build the GROQ query for the ``limit`` most recent newsletters.

    Raises:
        ValueError: If limit is not a positive integer.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError("limit must be a positive integer")
    return NEWSLETTER_QUERY.format(limit=limit)


class SanityClient:
    """Client for the read-only Sanity query API."""

    def __init__(self, config: Config) -> None:
        """Initialize client with the project configuration.

        Args:
            config: Project id, dataset, API version and optional read token.
        """
        self._config = config

    @property
    def query_url(self) -> str:
        config = self._config
        api_version = config.sanity_api_version
        if not api_version.startswith("v"):
            api_version = f"v{api_version}"
        return (
            f"https://{config.sanity_project_id}.api.sanity.io"
            f"/{api_version}/data/query/{config.sanity_dataset}"
        )

    def _headers(self) -> dict[str, str]:
        if self._config.sanity_token:
            return {"Authorization": f"Bearer {self._config.sanity_token}"}
        return {}

    def query(self, limit: int) -> list[Newsletter]:
        """Fetch up to ``limit`` newsletters, newest first.

        The order is the one the query imposes; nothing is re-sorted here.
        Records that fail validation are logged and skipped.

        Args:
            limit: Maximum number of records to request.

        Returns:
            List of Newsletter records.

        Raises:
            ValueError: If limit is not a positive integer.
            SanityAPIError: On a non-2xx response, a transport failure,
                or a response body that is not a valid result envelope.
        """
        params = {"query": build_query(limit)}

        try:
            response = httpx.get(self.query_url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise SanityAPIError(f"Sanity API request failed: {e}") from e

        if not response.is_success:
            raise SanityAPIError(
                f"Sanity API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SanityAPIError("Sanity API returned invalid JSON") from e

        if not isinstance(data, dict):
            raise SanityAPIError("Sanity API returned an unexpected result shape")

        results = data.get("result")
        if results is None:
            results = []
        if not isinstance(results, list):
            raise SanityAPIError("Sanity API returned an unexpected result shape")

        newsletters: list[Newsletter] = []
        for item in results:
            try:
                newsletters.append(Newsletter.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping malformed newsletter record: %s", e)

        logger.debug("Fetched %d newsletters from %s", len(newsletters), self.query_url)
        return newsletters

    def fetch_newsletters(self, limit: int = PAGE_LIMIT) -> list[Newsletter]:
        """Fetch newsletters, degrading every API failure to an empty list.

        Args:
            limit: Maximum number of records to request.

        Returns:
            List of Newsletter records, empty when the API could not be read.
        """
        try:
            return self.query(limit)
        except SanityAPIError as e:
            logger.error("Error fetching newsletters: %s", e)
            return []
