"""Column name normalization between the distant and local naming domains.

Distant tables use whatever names the remote source chose (usually
snake_case); foreign tables expose camelCase names.  Every distant column
name goes through a normalizer before it is compared with local columns.

Usage:
    from remote_table_sync.schema.naming import (
        CollisionPolicy,
        normalize_distant_columns,
        to_foreign_column_name,
    )

    to_foreign_column_name("first_name")  # 'firstName'

    columns = normalize_distant_columns(
        distant_columns,
        on_collision=CollisionPolicy.KEEP_FIRST,
    )
"""

import logging
import re
import unicodedata
from collections.abc import Callable, Sequence
from enum import Enum

from remote_table_sync.schema.models import DistantColumn, NormalizedColumn

logger = logging.getLogger(__name__)

ColumnNameNormalizer = Callable[[str], str]

# Runs of letters and digits in any script
_CHUNK_PATTERN = re.compile(r"[^\W_]+")

# Latin letters that NFKD leaves undecomposed
_DEBURR_TABLE = str.maketrans(
    {
        "Æ": "Ae",
        "æ": "ae",
        "Ð": "D",
        "ð": "d",
        "Đ": "D",
        "đ": "d",
        "Ł": "L",
        "ł": "l",
        "Ø": "O",
        "ø": "o",
        "Œ": "Oe",
        "œ": "oe",
        "Þ": "Th",
        "þ": "th",
        "ß": "ss",
        "ı": "i",
    }
)


class CollisionPolicy(str, Enum):
    """What to do when two distant columns normalize to the same name."""

    REJECT = "reject"
    KEEP_FIRST = "keep_first"
    KEEP_LAST = "keep_last"


class NormalizationCollisionError(ValueError):
    """Raised when distinct distant columns share a normalized name."""

    def __init__(self, normalized_name: str, raw_names: list[str]) -> None:
        self.normalized_name = normalized_name
        self.raw_names = raw_names
        super().__init__(
            f"Distant columns {', '.join(repr(n) for n in raw_names)} "
            f"all normalize to '{normalized_name}'"
        )


def _deburr(text: str) -> str:
    """Strip accents: ``"prénom"`` -> ``"prenom"``."""
    decomposed = unicodedata.normalize("NFKD", text.translate(_DEBURR_TABLE))
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def _split_case(chunk: str) -> list[str]:
    """Split a run of letters and digits on case and digit boundaries.

    Breaks before an upper-case letter that follows a lower-case one
    (``userID``), before the last capital of an acronym followed by a
    lower-case letter (``HTTPServer``), and before a letter that follows a
    digit.  Caseless scripts never split on case.
    """
    words: list[str] = []
    start = 0
    for i in range(1, len(chunk)):
        prev, char = chunk[i - 1], chunk[i]
        next_char = chunk[i + 1] if i + 1 < len(chunk) else ""
        if (
            (prev.islower() and char.isupper())
            or (prev.isupper() and char.isupper() and next_char.islower())
            or (prev.isdigit() and char.isalpha())
        ):
            words.append(chunk[start:i])
            start = i
    words.append(chunk[start:])
    return words


def to_foreign_column_name(raw_name: str) -> str:
    """Convert a distant column name to the camelCase name used locally.

    Accents are stripped first; letters of any script are kept.

    Examples:
        >>> to_foreign_column_name("first_name")
        'firstName'
        >>> to_foreign_column_name("userID")
        'userId'
        >>> to_foreign_column_name("address_2")
        'address2'
        >>> to_foreign_column_name("prénom")
        'prenom'
    """
    words = [
        word
        for chunk in _CHUNK_PATTERN.findall(_deburr(raw_name))
        for word in _split_case(chunk)
    ]
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word.capitalize() for word in tail)


def normalize_distant_columns(
    distant_columns: Sequence[DistantColumn],
    normalize: ColumnNameNormalizer = to_foreign_column_name,
    on_collision: CollisionPolicy = CollisionPolicy.REJECT,
) -> list[NormalizedColumn]:
    """Rename distant columns into the local naming convention.

    Order is preserved.  A raw name repeated verbatim is kept once; two
    different raw names mapping to one normalized name are a collision,
    handled according to *on_collision*.

    Args:
        distant_columns: Columns of one distant table.
        normalize: Raw name -> local name function.
        on_collision: Collision policy (default: reject).

    Returns:
        List of ``NormalizedColumn`` with unique names.

    Raises:
        NormalizationCollisionError: On a collision under ``REJECT``.
    """
    normalized: dict[str, NormalizedColumn] = {}
    raw_names: dict[str, str] = {}

    for column in distant_columns:
        name = normalize(column.column_name)
        previous_raw = raw_names.get(name)

        if previous_raw is None:
            normalized[name] = NormalizedColumn(name=name, type=column.data_type)
            raw_names[name] = column.column_name
            continue

        if previous_raw == column.column_name:
            continue

        if on_collision == CollisionPolicy.REJECT:
            raise NormalizationCollisionError(name, [previous_raw, column.column_name])

        logger.warning(
            f"Distant columns '{previous_raw}' and '{column.column_name}' "
            f"both normalize to '{name}' ({on_collision.value})"
        )
        if on_collision == CollisionPolicy.KEEP_LAST:
            normalized[name] = NormalizedColumn(name=name, type=column.data_type)
            raw_names[name] = column.column_name

    return list(normalized.values())
