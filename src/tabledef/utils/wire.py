from typing import Any, Optional

from tabledef.utils.exceptions import InvalidArgumentError


def int64_to_pb(value: Optional[int]) -> Optional[str]:
    """
    BigQuery transmits int64 values as decimal strings.
    """
    if value is None:
        return None
    return str(value)


def int64_from_pb(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Expected an int64 value, got {value!r}") from e


def drop_none(payload: dict) -> dict:
    return {k: v for k, v in payload.items() if v is not None}
