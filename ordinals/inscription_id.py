"""Inscription identifiers of the form ``<txid>i<index>``."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_TXID_LEN = 64
_MIN_LEN = _TXID_LEN + 2
_U32_MAX = 2**32 - 1
_HEX_RE = re.compile(r"[0-9a-fA-F]")
_UINT_RE = re.compile(r"\+?[0-9]+", re.ASCII)


class InscriptionIdErrorKind(enum.Enum):
    CHARACTER = "character"
    LENGTH = "length"
    SEPARATOR = "separator"
    TXID = "txid"
    INDEX = "index"


class InscriptionIdError(ValueError):
    """Raised when an inscription id cannot be parsed."""

    def __init__(self, kind: InscriptionIdErrorKind, detail) -> None:
        self.kind = kind
        self.detail = detail
        messages = {
            InscriptionIdErrorKind.CHARACTER: f"invalid character: '{detail}'",
            InscriptionIdErrorKind.LENGTH: f"invalid length: {detail}",
            InscriptionIdErrorKind.SEPARATOR: f"invalid seprator: `{detail}`",
            InscriptionIdErrorKind.TXID: f"invalid txid: {detail}",
            InscriptionIdErrorKind.INDEX: f"invalid index: {detail}",
        }
        super().__init__(messages[kind])


def parse_txid(text: str) -> str:
    """Validate a 64-digit hex transaction id and return it in lower case."""
    if len(text) != _TXID_LEN:
        raise ValueError(f"bad hex string length {len(text)} (expected {_TXID_LEN})")
    for position, char in enumerate(text):
        if not _HEX_RE.fullmatch(char):
            raise ValueError(f"invalid hex character {char!r} at position {position}")
    return text.lower()


def parse_u32(text: str) -> int:
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _UINT_RE.fullmatch(text):
        raise ValueError("invalid digit found in string")
    value = int(text)
    if value > _U32_MAX:
        raise ValueError("number too large to fit in target type")
    return value


@dataclass(frozen=True)
class InscriptionId:
    """A transaction id together with the index of an inscription in it."""

    txid: str
    index: int = 0

    def __str__(self) -> str:
        return f"{self.txid}i{self.index}"

    @classmethod
    def from_txid(cls, txid: str) -> InscriptionId:
        return cls(parse_txid(txid), 0)

    @classmethod
    def parse(cls, s: str) -> InscriptionId:
        for char in s:
            if not char.isascii():
                raise InscriptionIdError(InscriptionIdErrorKind.CHARACTER, char)
        if len(s) < _MIN_LEN:
            raise InscriptionIdError(InscriptionIdErrorKind.LENGTH, len(s))
        separator = s[_TXID_LEN]
        if separator != "i":
            raise InscriptionIdError(InscriptionIdErrorKind.SEPARATOR, separator)
        try:
            txid = parse_txid(s[:_TXID_LEN])
        except ValueError as err:
            raise InscriptionIdError(InscriptionIdErrorKind.TXID, err) from None
        try:
            index = parse_u32(s[_TXID_LEN + 1:])
        except ValueError as err:
            raise InscriptionIdError(InscriptionIdErrorKind.INDEX, err) from None
        return cls(txid, index)