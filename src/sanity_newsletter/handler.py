"""AWS Lambda handler serving the newsletter RSS feed.

Exposed behind API Gateway at ``GET /api/newsletter-rss``. Each request
queries Sanity for the most recent issues and returns the feed as XML;
the CDN in front caches it according to the Cache-Control header.

Module-level initialization is used for cold start optimization:
configuration and the API client are built once when the Lambda
container starts, not on every invocation.
"""

import logging
import os
from typing import Any

import boto3

from sanity_newsletter.config import Config
from sanity_newsletter.rss import build_rss_feed
from sanity_newsletter.sanity_client import HTTP_FEED_LIMIT, SanityClient

logger = logging.getLogger(__name__)

RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"
CACHE_CONTROL = "s-maxage=3600, stale-while-revalidate=600"
ERROR_BODY = "Error generating RSS feed"

_config: Config | None = None
_client: SanityClient | None = None
_init_error: Exception | None = None


def _get_secret(secret_name: str) -> str:
    """Retrieve secret value from AWS Secrets Manager.

    Args:
        secret_name: The name or ARN of the secret to retrieve.

    Returns:
        The secret string value.

    Raises:
        ClientError: If the secret cannot be retrieved.
    """
    client = boto3.client("secretsmanager")
    response = client.get_secret_value(SecretId=secret_name)
    return response["SecretString"]


def _initialize() -> None:
    """Initialize module-level resources at container startup.

    The read token comes from Secrets Manager when
    SANITY_TOKEN_SECRET_NAME is set, otherwise from SANITY_TOKEN.
    Errors are captured rather than raised so the handler can return
    a proper error response instead of crashing.
    """
    global _config, _client, _init_error

    try:
        secret_name = os.environ.get("SANITY_TOKEN_SECRET_NAME")
        if secret_name:
            _config = Config(sanity_token=_get_secret(secret_name))
        else:
            _config = Config()

        _client = SanityClient(_config)
        _init_error = None

    except Exception as e:
        logger.exception("Failed to initialize RSS handler")
        _init_error = e


_initialize()


def _request_method(event: Any) -> str:
    """Read the HTTP method from a REST or HTTP API event, defaulting to GET."""
    if not isinstance(event, dict):
        return "GET"
    method = event.get("httpMethod")
    if not method:
        request_context = event.get("requestContext") or {}
        http = request_context.get("http") if isinstance(request_context, dict) else None
        method = http.get("method") if isinstance(http, dict) else None
    return str(method or "GET").upper()


def _feed_response(xml: str, include_body: bool = True) -> dict[str, Any]:
    """Build a successful feed response.

    Args:
        xml: The RSS document.
        include_body: False for HEAD requests.

    Returns:
        API Gateway-style response with statusCode 200.
    """
    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": RSS_CONTENT_TYPE,
            "Cache-Control": CACHE_CONTROL,
        },
        "body": xml if include_body else "",
    }


def _error_response(status_code: int, message: str) -> dict[str, Any]:
    """Build a plain-text error response.

    The message is fixed text so tokens and internal details never leak.
    """
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "text/plain; charset=utf-8"},
        "body": message,
    }


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point.

    Args:
        event: API Gateway proxy event.
        context: Lambda context (unused but required by AWS).

    Returns:
        API Gateway-style response with statusCode, headers and body.

    Response codes:
        200: Success - body is the RSS feed
        405: Method other than GET or HEAD
        500: Configuration error or the feed could not be generated
    """
    method = _request_method(event)
    if method not in ("GET", "HEAD"):
        return _error_response(405, "Method not allowed")

    if _init_error is not None:
        return _error_response(500, ERROR_BODY)

    try:
        newsletters = _client.query(limit=HTTP_FEED_LIMIT)
        xml = build_rss_feed(
            newsletters,
            _config.site_url,
            title=_config.feed_title,
            description=_config.feed_description,
        )
        return _feed_response(xml, include_body=method == "GET")

    except Exception:
        logger.exception("Error generating RSS feed")
        return _error_response(500, ERROR_BODY)
