# addonhub/core/links.py

# Prefixes that mark a reference as already absolute (or in-page).
_ABSOLUTE_PREFIXES = ("http://", "https://", "/", "#")


def is_relative_uri(uri: str) -> bool:
    """
    Decide whether a URI reference found in a readme is relative to the
    repository. Anything starting with a protocol, a slash or a hash is not;
    everything else, including the empty string, is.
    """
    return not uri.startswith(_ABSOLUTE_PREFIXES)
