"""
Query string editing that leaves untouched parameters exactly as they were.

urlencode(parse_qsl(...)) would re-encode (and possibly reorder) every
parameter; affiliate rewriting must only touch the ones it owns, so these
helpers work on the raw "key=value" segments instead.
"""

from typing import Dict, Iterable, Optional
from urllib.parse import unquote_plus, urlencode, urlsplit, urlunsplit


def _segment_key(segment: str) -> str:
    return unquote_plus(segment.split("=", 1)[0])


def set_query_params(url: str, values: Dict[str, Optional[str]]) -> str:
    """
    Set (or, for None values, remove) query parameters.

    An existing parameter is replaced where it stands and any repeats of it
    are dropped; new parameters are appended. All other segments are kept
    byte for byte.

    Raises:
        ValueError: if the URL can't be parsed
    """
    parts = urlsplit(url)
    segments = parts.query.split("&") if parts.query else []

    pending = dict(values)
    rewritten = []
    for segment in segments:
        key = _segment_key(segment)
        if key not in values:
            rewritten.append(segment)
            continue

        if key in pending:
            value = pending.pop(key)
            if value is not None:
                rewritten.append(urlencode({key: value}))

    for key, value in pending.items():
        if value is not None:
            rewritten.append(urlencode({key: value}))

    return urlunsplit(parts._replace(query="&".join(rewritten)))


def strip_query_params(url: str, names: Iterable[str] = (), prefixes: Iterable[str] = ()) -> str:
    """
    Remove query parameters by exact name or name prefix.

    Returns the URL unchanged (same string) when nothing was removed.

    Raises:
        ValueError: if the URL can't be parsed
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    names = frozenset(names)
    prefixes = tuple(prefixes)

    segments = parts.query.split("&")
    kept = [
        segment for segment in segments
        if not (_segment_key(segment) in names or _segment_key(segment).startswith(prefixes))
    ]
    if len(kept) == len(segments):
        return url

    return urlunsplit(parts._replace(query="&".join(kept)))
