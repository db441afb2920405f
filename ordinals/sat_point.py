"""Transaction outputs and positions of sats within them."""

from __future__ import annotations

import functools
import struct
from dataclasses import dataclass

from .inscription_id import parse_txid
from .sat import _parse_u64

_U32_MAX = 2**32 - 1
_ENCODING = struct.Struct("<32sIQ")


@functools.total_ordering
@dataclass(frozen=True, eq=True)
class OutPoint:
    """A reference to a transaction output."""

    txid: str
    vout: int

    def _key(self):
        return (bytes.fromhex(self.txid)[::-1], self.vout)

    def __lt__(self, other):
        if not isinstance(other, OutPoint):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        return f"{self.txid}:{self.vout}"

    @classmethod
    def parse(cls, s: str) -> OutPoint:
        if len(s) > 75:
            raise ValueError("outpoint string too long")
        colon = s.rfind(":")
        if colon != 64:
            raise ValueError("outpoint must be of the form <txid>:<vout>")
        txid = parse_txid(s[:colon])
        vout_text = s[colon + 1:]
        if len(vout_text) > 1 and vout_text[0] in "0+":
            raise ValueError("vout must be canonical")
        if not vout_text.isascii() or not vout_text.isdigit():
            raise ValueError("invalid vout")
        vout = int(vout_text)
        if vout > _U32_MAX:
            raise ValueError("vout too large")
        return cls(txid, vout)


@functools.total_ordering
@dataclass(frozen=True, eq=True)
class SatPoint:
    """An outpoint plus an offset into its sats."""

    outpoint: OutPoint
    offset: int

    def __lt__(self, other):
        if not isinstance(other, SatPoint):
            return NotImplemented
        return (self.outpoint, self.offset) < (other.outpoint, other.offset)

    def __str__(self) -> str:
        return f"{self.outpoint}:{self.offset}"

    @classmethod
    def parse(cls, s: str) -> SatPoint:
        outpoint, sep, offset = s.rpartition(":")
        if not sep:
            raise ValueError(f"invalid satpoint: {s}")
        return cls(OutPoint.parse(outpoint), _parse_u64(offset))

    def encode(self) -> bytes:
        """Consensus encoding: txid bytes, little-endian vout and offset."""
        txid = bytes.fromhex(self.outpoint.txid)[::-1]
        return _ENCODING.pack(txid, self.outpoint.vout, self.offset)

    @classmethod
    def decode(cls, data: bytes) -> SatPoint:
        if len(data) < _ENCODING.size:
            raise ValueError("unexpected end of data")
        txid, vout, offset = _ENCODING.unpack_from(data)
        return cls(OutPoint(txid[::-1].hex(), vout), offset)