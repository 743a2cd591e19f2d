"""URL-building capability used by the weather client."""

from collections.abc import Mapping
from typing import Protocol

import httpx


class URLBuilder(Protocol):
    """Builds a request URL from a base endpoint and query parameters.

    Returns None when no usable URL can be produced.
    """

    def __call__(self, base_url: str, params: Mapping[str, str]) -> str | None: ...


def build_url(base_url: str, params: Mapping[str, str]) -> str | None:
    """Append query parameters to an absolute http(s) endpoint.

    Args:
        base_url: Endpoint such as https://api.openweathermap.org/data/2.5/weather
        params: Query parameters, appended in order

    Returns:
        The encoded URL, or None if base_url is not an absolute http(s) URL
    """
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL:
        return None
    if url.scheme not in ("http", "https") or not url.host:
        return None
    return str(url.copy_merge_params(dict(params)))
