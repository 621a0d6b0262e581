from typing import (
    List,
    Tuple,
)

from rlp.codec import (
    consume_length_prefix,
)
from rlp.exceptions import (
    DecodingError,
)

from newchain.constants import (
    MAX_RLP_NESTING_DEPTH,
)
from newchain.exceptions import (
    MalformedEncoding,
    TruncatedField,
)


def _length_of_length(first_byte: int) -> int:
    if 0xb7 < first_byte < 0xc0:
        return first_byte - 0xb7
    elif first_byte > 0xf7:
        return first_byte - 0xf7
    else:
        return 0


def _read_length_prefix(encoded: bytes, position: int, end: int) -> Tuple[int, int, bool]:
    """
    Return ``(payload_start, payload_length, is_list)`` for the item at ``position``.
    """
    length_end = position + 1 + _length_of_length(encoded[position])
    if length_end > end:
        raise TruncatedField(
            f"Length prefix at offset {position} needs {length_end - position} bytes,"
            f" only {end - position} available"
        )

    try:
        _, item_type, payload_length, payload_start = consume_length_prefix(
            encoded, position
        )
    except IndexError as err:
        raise TruncatedField(f"Item at offset {position} is cut short") from err
    except DecodingError as err:
        raise MalformedEncoding(f"Invalid length prefix at offset {position}: {err}") from err

    return payload_start, payload_length, item_type is list


def validate_item_lengths(
    encoded: bytes,
    start: int = 0,
    end: int = None,
    max_depth: int = MAX_RLP_NESTING_DEPTH,
) -> None:
    """
    Walk every rlp item in ``encoded[start:end]`` and raise
    :class:`~newchain.exceptions.TruncatedField` if an item declares more
    bytes than its container holds. Lists nested deeper than ``max_depth``
    raise :class:`~newchain.exceptions.MalformedEncoding`.

    Everything else (canonical prefixes, trailing bytes) is left to :mod:`rlp`.
    """
    if end is None:
        end = len(encoded)

    # end offsets of the lists being walked, innermost last
    container_ends: List[int] = [end]
    position = start
    while container_ends:
        container_end = container_ends[-1]
        if position >= container_end:
            container_ends.pop()
            continue

        payload_start, payload_length, is_list = _read_length_prefix(
            encoded, position, container_end
        )
        payload_end = payload_start + payload_length
        if payload_end > container_end:
            raise TruncatedField(
                f"Item at offset {position} declares {payload_length} bytes,"
                f" only {container_end - payload_start} available"
            )

        if is_list:
            if len(container_ends) > max_depth:
                raise MalformedEncoding(
                    f"Lists nested more than {max_depth} deep at offset {position}"
                )
            container_ends.append(payload_end)
            position = payload_start
        else:
            position = payload_end
