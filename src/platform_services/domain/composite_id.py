"""
Composite id encoding.

Entities returned by a composite carry ids of the form ``p<index>_<id>``
where ``index`` is the owning adapter's position in the composite. The
original id may contain underscores; decoding splits on the first one only.
"""

import re

_COMPOSITE_ID = re.compile(r"^p(\d+)_(.+)$", re.DOTALL)


def encode_composite_id(index: int, original_id: str) -> str:
    """
    Namespace a backend id with its adapter index.

    Raises:
        ValueError: If index is negative
    """
    if index < 0:
        raise ValueError(f"Adapter index must be non-negative, got {index}")
    return f"p{index}_{original_id}"


def decode_composite_id(
    composite_id: str, adapter_count: int | None = None
) -> tuple[int, str] | None:
    """
    Split a composite id into ``(index, original_id)``.

    Args:
        composite_id: Id to decode
        adapter_count: When given, indices outside ``[0, adapter_count)``
            are rejected

    Returns:
        The decoded pair, or None if the id is not a composite id for an
        adapter list of the given size
    """
    if not isinstance(composite_id, str):
        return None

    match = _COMPOSITE_ID.match(composite_id)
    if match is None:
        return None

    index = int(match.group(1))
    if adapter_count is not None and index >= adapter_count:
        return None

    return index, match.group(2)


def is_composite_id(value: str) -> bool:
    return decode_composite_id(value) is not None
