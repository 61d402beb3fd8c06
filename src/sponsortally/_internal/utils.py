"""Small helpers."""

from __future__ import annotations


def normalize_url(url: str | None) -> str | None:
    """Return an absolute URL, or `None` for empty values.

    Parameters:
        url: A URL, with or without scheme.

    Returns:
        The URL, prefixed with `https://` when it has no scheme.
    """
    if not url:
        return None
    url = url.strip()
    if not url:
        return None
    if url.startswith(("http://", "https://")):
        return url
    return f"https://{url.removeprefix('//')}"
