from typing import Iterable, Optional


def ci_fetch_string(strings: Iterable, target: str) -> Optional[str]:
    """Fetch a string from a collection of strings, case-insensitively.

    e.g. ci_fetch_string(['Thrasher'], 'THRASHER') returns 'Thrasher', the
    string as it exists in the collection, or None if there is no match.
    """
    if target is None:
        return None
    wanted = str(target).casefold()
    for item in strings:
        if str(item).casefold() == wanted:
            return item
    return None
