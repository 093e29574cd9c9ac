from typing import Iterable, List, Tuple

from packaging.version import InvalidVersion, Version


def version_key(v: str) -> Tuple[int, Version]:
    # Composer branch aliases such as "dev-master" are not PEP 440 versions;
    # they sort below every parseable one.
    try:
        return 1, Version(v)
    except InvalidVersion:
        return 0, Version("0")


def newest_first(versions: Iterable[str]) -> List[str]:
    return sorted(versions, key=version_key, reverse=True)
