"""Helpers for library item identifiers."""
import hashlib
import uuid

EMPTY_ID = uuid.UUID(int=0).hex


def parse_item_id(value: str | None) -> str | None:
    """Parse a client supplied identifier into its canonical 32-char hex form.

    Blank values and the all-zero id mean "not specified" and return None.
    Raises ValueError when the value is not a valid GUID.
    """
    if value is None or not value.strip():
        return None

    try:
        parsed = uuid.UUID(value.strip())
    except ValueError:
        raise ValueError(f"Invalid id: {value!r}") from None

    if parsed.hex == EMPTY_ID:
        return None
    return parsed.hex


def name_to_category_id(name: str) -> str:
    """Stable id for a category that has no natural item id (e.g. a person name).

    MD5 of the UTF-16LE encoded name, laid out in GUID byte order.
    """
    digest = hashlib.md5(name.encode("utf-16-le")).digest()
    return uuid.UUID(bytes_le=digest).hex
