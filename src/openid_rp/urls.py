from __future__ import annotations

from typing import Any, Iterable, Mapping, Tuple, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

from openid_rp.errors import UrlError

QueryParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def compose(base: str, params: QueryParams) -> str:
    """Append ``params`` to the query string of ``base``.

    The existing query of ``base`` is kept verbatim and comes first, so
    provider-specific parameters carried by a discovered endpoint survive.
    User info, port, path and fragment are preserved as well.
    """
    try:
        parts = urlsplit(base)
    except ValueError as exc:
        raise UrlError(f"Invalid base URL: {base!r}", description=str(exc)) from exc

    encoded = urlencode(_pairs(params), doseq=True)
    if parts.query and encoded:
        query = f"{parts.query}&{encoded}"
    else:
        query = parts.query or encoded

    result = urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
    validate_absolute(result)
    return result


def validate_absolute(url: str) -> str:
    """Raise :class:`UrlError` unless ``url`` has both a scheme and a host."""
    try:
        parts = urlsplit(url)
        parts.port  # raises on a malformed port
    except ValueError as exc:
        raise UrlError(f"Invalid URL: {url!r}", description=str(exc)) from exc
    if not parts.scheme or not parts.hostname:
        raise UrlError(f"Invalid URL: {url!r}", description="missing scheme or host")
    return url


def parse_url(url: str) -> str:
    """Check that ``url`` parses, relative references included."""
    try:
        urlsplit(url).port
    except ValueError as exc:
        raise UrlError(f"Invalid URL: {url!r}", description=str(exc)) from exc
    return url


def _pairs(params: QueryParams) -> list[tuple[str, Any]]:
    items = params.items() if isinstance(params, Mapping) else params
    return [(str(k), v) for k, v in items if v is not None]
