from typing import List
from hearth.utils.security import is_valid_guid


def ensure_guid(value: str) -> str:
    """Reject identifiers that are not UUID strings."""
    if not is_valid_guid(value):
        raise ValueError("must be a valid GUID")
    return value


def ensure_guid_list(values: List[str]) -> List[str]:
    for value in values:
        ensure_guid(value)
    return values
