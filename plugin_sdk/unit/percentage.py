"""Percentage values written with or without a trailing ``%`` marker.

Configuration documents express rollout sizes and traffic weights either as a
bare integer (``"50"``) or as a percentage (``"50%"``). :class:`Percentage`
keeps both the number and whether the marker was present, so a value decoded
from a document renders back to the exact token it was read from.

Document encoding always uses a JSON string, never a bare JSON number::

    >>> p = unmarshal_json('"75%"')
    >>> p.number, p.has_suffix
    (75, True)
    >>> marshal_json(p)
    '"75%"'
    >>> int(p)
    75
"""

from __future__ import annotations

import json
import operator
import re
from dataclasses import dataclass
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from plugin_sdk.core.errors import ParseError
from plugin_sdk.core.logging import get_logger

__all__ = [
    "PERCENT_SUFFIX",
    "TOKEN_PATTERN",
    "Percentage",
    "marshal_json",
    "unmarshal_json",
]


PERCENT_SUFFIX = "%"
TOKEN_PATTERN = r"^[+-]?[0-9]+%?$"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# ASCII only; str.isdigit() and int() would also take other Unicode digits.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

logger = get_logger("plugin_sdk.unit.percentage", component="unit")


def _parse_int64(text: str) -> int:
    """Parse a signed base-10 integer that must fit in 64 bits."""

    if not _INTEGER_RE.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


@dataclass(frozen=True, slots=True)
class Percentage:
    """Signed integer quantity that remembers whether it carried a ``%`` suffix.

    ``has_suffix`` only affects rendering: ``int()`` returns ``number`` either way.
    """

    number: int = 0
    has_suffix: bool = False

    def __post_init__(self) -> None:
        # Floats and strings fail here instead of when rendered.
        object.__setattr__(self, "number", operator.index(self.number))
        object.__setattr__(self, "has_suffix", bool(self.has_suffix))

    @classmethod
    def parse(cls, text: str) -> "Percentage":
        """Decode an unquoted token such as ``"50"``, ``"-5%"`` or ``"+7"``.

        Exactly one trailing ``%`` is removed before the remainder is parsed.
        No range check is applied beyond the 64-bit integer limits.

        Raises:
            ParseError: If the remainder is not a signed base-10 integer.
        """
        raw = text
        has_suffix = text.endswith(PERCENT_SUFFIX)
        if has_suffix:
            text = text[: -len(PERCENT_SUFFIX)]
        try:
            number = _parse_int64(text)
        except ValueError as exc:
            logger.debug(
                "percentage_parse_failed",
                extra={"structured_data": {"raw": raw, "error": str(exc)}},
            )
            raise ParseError(raw, f"invalid percentage {raw!r}: {exc}") from exc
        return cls(number, has_suffix)

    def as_int(self) -> int:
        return self.number

    def as_tuple(self) -> tuple[int, bool]:
        return self.number, self.has_suffix

    def is_zero(self) -> bool:
        """Return True for the zero value, which documents may omit."""
        return self.number == 0 and not self.has_suffix

    def __int__(self) -> int:
        return self.number

    def __str__(self) -> str:
        if self.has_suffix:
            return f"{self.number:d}{PERCENT_SUFFIX}"
        return f"{self.number:d}"

    # pydantic integration -------------------------------------------------

    @classmethod
    def _validate(cls, value: Any) -> "Percentage":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        # Native numbers are not part of the document contract.
        raise ParseError(
            repr(value),
            f"invalid percentage {value!r}: expected a string such as '50' or '50%'",
        )

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {"type": "string", "pattern": TOKEN_PATTERN}


def marshal_json(value: Percentage) -> str:
    """Encode ``value`` as a JSON string literal, e.g. ``'"50%"'``."""

    return json.dumps(str(value))


def unmarshal_json(data: str | bytes | bytearray) -> Percentage:
    """Decode a JSON string token into a :class:`Percentage`.

    The token is unquoted with the JSON decoder, so escapes are honoured and
    stray quote characters are never trimmed blindly. Bare JSON numbers,
    ``null`` and other non-string tokens are rejected on purpose: ``50`` must
    be written ``"50"``, even though a quote-trimming decoder would take it.

    Raises:
        ParseError: If the token is not a JSON string holding a valid percentage.
    """
    raw = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(raw, f"invalid percentage {raw!r}: {exc.msg}") from exc
    if not isinstance(decoded, str):
        raise ParseError(raw, f"invalid percentage {raw!r}: expected a JSON string")
    return Percentage.parse(decoded)
