"""Schema retrieval from a live GraphQL endpoint.

Sends the standard introspection query (built by graphql-core) and parses
the response into a ``Schema``.
"""

import logging
from collections.abc import Mapping

import httpx
from graphql import get_introspection_query

from .errors import SchemaFetchError
from .schema import Schema, parse_introspection

logger = logging.getLogger(__name__)

# Characters of the response body kept in SchemaFetchError
BODY_SNIPPET_LENGTH = 500


async def fetch_schema(
    url: str,
    headers: Mapping[str, str] | None = None,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Schema:
    """POST the introspection query to ``url`` and parse the result.

    Args:
        url: GraphQL endpoint
        headers: Extra request headers (e.g. authorization)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (e.g. a mock in tests)

    Raises:
        SchemaFetchError: If the request fails or the endpoint answers with a non-success status
        SchemaIntegrityError: If the response is not an introspection result
    """
    request_headers = {"Content-Type": "application/json"}
    request_headers.update(headers or {})
    payload = {"query": get_introspection_query(descriptions=True)}

    logger.debug("Fetching schema from %s", url)
    try:
        async with httpx.AsyncClient(timeout=timeout, headers=request_headers, transport=transport) as client:
            response = await client.post(url, json=payload)
    except httpx.HTTPError as e:
        raise SchemaFetchError(None, str(e)[:BODY_SNIPPET_LENGTH], message=f"Request to {url} failed: {e}") from e

    if not response.is_success:
        raise SchemaFetchError(response.status_code, response.text[:BODY_SNIPPET_LENGTH])

    return parse_introspection(response.content)
