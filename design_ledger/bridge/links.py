"""Shareable bridge links: a base URL with the blob in one query parameter."""

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

DEFAULT_PARAM = "bridge"


def build_bridge_link(base_url: str, blob: str, param: str = DEFAULT_PARAM) -> str:
    """
    Put a bridge blob into a link.

    Other query parameters are kept; an existing bridge parameter is
    replaced. Any fragment is dropped.
    """
    parts = urlsplit(base_url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != param
    ]
    query.append((param, blob))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), ""))


def extract_bridge_blob(url: str, param: str = DEFAULT_PARAM) -> Optional[str]:
    """Return the bridge blob carried by a link, or None if it has none."""
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key == param and value:
            return value
    return None


def strip_bridge_param(url: str, param: str = DEFAULT_PARAM) -> str:
    """The link with its bridge parameter removed (after import or ignore)."""
    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != param
    ]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))
