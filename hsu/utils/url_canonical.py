"""URL canonicalization for signing and verification.

The canonical string is what actually gets signed: the URL path plus its
query string, with excluded keys (always the signature key) removed.  Scheme,
host and fragment never participate, so a link signed as an absolute URL
verifies against the relative request target the server sees.

Two ordering strategies are supported:

- **sorted** (default) -- pairs are stable-sorted by key, so a proxy or client
  that reorders parameters does not break verification.  Repeated keys keep
  their relative order.
- **preserved** -- pairs keep their original order, byte-for-byte with the
  request shape.

Whichever strategy is configured must be used on both sides.

Percent-escapes are decoded as UTF-8 with ``surrogateescape`` and encoded
back the same way, so bytes that are not valid UTF-8 (``%FF``) survive
unchanged and stay distinct from each other.

The path is normalised by decoding and re-quoting it.  Equivalent spellings
such as ``/a%20b`` and ``/a b`` sign the same string, and so do ``/a%2Fb``
and ``/a/b``: a route that must tell an encoded slash from a real one cannot
rely on the signature for that.
"""

from collections.abc import Iterable
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

SIGNATURE_KEY = "signature"
EXPIRES_KEY = "expires"

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def query_pairs(url: str) -> list[tuple[str, str]]:
    """Return the decoded query parameters of *url* in their original order."""
    return parse_qsl(
        urlsplit(url).query, keep_blank_values=True, encoding=_ENCODING, errors=_ERRORS
    )


def encode_query(pairs: Iterable[tuple[str, str]]) -> str:
    """Inverse of :func:`query_pairs`; undecodable bytes are restored."""
    return urlencode(list(pairs), encoding=_ENCODING, errors=_ERRORS)


def query_value(url: str, key: str) -> str | None:
    """Return the first value for *key* in the query of *url*, or ``None``."""
    for name, value in query_pairs(url):
        if name == key:
            return value
    return None


def canonical_path(path: str) -> str:
    """Return *path* with percent-escapes normalised; empty becomes ``/``."""
    decoded = unquote(path, encoding=_ENCODING, errors=_ERRORS)
    return quote(decoded, safe="/", encoding=_ENCODING, errors=_ERRORS) or "/"


def canonicalize(url: str, exclude_keys: Iterable[str], sort: bool = True) -> str:
    """Build the canonical ``path[?query]`` string for *url*.

    Args:
        url: Absolute or relative URL.
        exclude_keys: Query keys to drop before serialising.
        sort: Stable-sort remaining pairs by key when True.

    Returns:
        ``path`` when no parameters remain, else ``path + "?" + query``.
        The result is plain ASCII.
    """
    excluded = frozenset(exclude_keys)
    parts = urlsplit(url)
    pairs = [(name, value) for name, value in query_pairs(url) if name not in excluded]
    if sort:
        pairs.sort(key=lambda pair: pair[0])

    path = canonical_path(parts.path)
    if not pairs:
        return path
    return f"{path}?{encode_query(pairs)}"


def with_query(url: str, pairs: list[tuple[str, str]]) -> str:
    """Return *url* with its query replaced by *pairs*, keeping the fragment."""
    parts = urlsplit(url)
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, encode_query(pairs), parts.fragment)
    )
