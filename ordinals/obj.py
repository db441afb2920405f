"""Parsing arbitrary ordinal objects: addresses, hashes, sats and more."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from .inscription_id import InscriptionId
from .representation import Representation
from .sat import Sat
from .sat_point import OutPoint, SatPoint

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3
_NETWORKS = {"bc": "bitcoin", "tb": "testnet", "bcrt": "regtest"}
_U128_MAX = 2**128 - 1
_UINT_RE = re.compile(r"\+?[0-9]+", re.ASCII)


def _polymod(values) -> int:
    generators = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i, gen in enumerate(generators):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data, from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = bits = 0
    out = []
    maxv = (1 << to_bits) - 1
    for value in data:
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & maxv)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        raise ValueError("invalid padding in address")
    return out


@dataclass(frozen=True)
class Address:
    """A segwit address."""

    hrp: str
    version: int
    program: bytes

    @property
    def network(self) -> str:
        return _NETWORKS[self.hrp]

    def __str__(self) -> str:
        data = [self.version] + _convert_bits(self.program, 8, 5, True)
        const = _BECH32_CONST if self.version == 0 else _BECH32M_CONST
        poly = _polymod(_hrp_expand(self.hrp) + data + [0] * 6) ^ const
        checksum = [(poly >> 5 * (5 - i)) & 31 for i in range(6)]
        return self.hrp + "1" + "".join(_CHARSET[d] for d in data + checksum)

    @classmethod
    def parse(cls, s: str) -> Address:
        if s.lower() != s and s.upper() != s:
            raise ValueError("mixed case address")
        text = s.lower()
        if len(text) > 90:
            raise ValueError("address too long")
        pos = text.rfind("1")
        if pos < 1 or pos + 7 > len(text):
            raise ValueError("invalid bech32 separator position")
        hrp = text[:pos]
        if hrp not in _NETWORKS:
            raise ValueError(f"unknown address prefix: {hrp}")
        try:
            data = [_CHARSET.index(c) for c in text[pos + 1:]]
        except ValueError:
            raise ValueError("invalid bech32 character") from None
        const = _polymod(_hrp_expand(hrp) + data)
        if const not in (_BECH32_CONST, _BECH32M_CONST):
            raise ValueError("invalid bech32 checksum")
        payload = data[:-6]
        if not payload:
            raise ValueError("empty witness program")
        version = payload[0]
        if version > 16:
            raise ValueError("invalid witness version")
        program = bytes(_convert_bits(payload[1:], 5, 8, False))
        if not 2 <= len(program) <= 40:
            raise ValueError("invalid witness program length")
        if version == 0 and len(program) not in (20, 32):
            raise ValueError("invalid segwit v0 program length")
        expected = _BECH32_CONST if version == 0 else _BECH32M_CONST
        if const != expected:
            raise ValueError("invalid checksum variant")
        return cls(hrp, version, program)


class ObjectKind(enum.Enum):
    ADDRESS = "address"
    HASH = "hash"
    INSCRIPTION_ID = "inscription_id"
    INTEGER = "integer"
    OUTPOINT = "outpoint"
    SAT = "sat"
    SATPOINT = "satpoint"


def _parse_u128(s: str) -> int:
    if not _UINT_RE.fullmatch(s):
        raise ValueError("invalid integer")
    value = int(s)
    if value > _U128_MAX:
        raise ValueError("number too large to fit in target type")
    return value


@dataclass(frozen=True)
class Object:
    """Any value that can be written in ordinal notation."""

    kind: ObjectKind
    value: object

    def __str__(self) -> str:
        if self.kind is ObjectKind.HASH:
            return self.value.hex()
        return str(self.value)

    @classmethod
    def parse(cls, s: str) -> Object:
        rep = Representation.detect(s)
        if rep is Representation.ADDRESS:
            return cls(ObjectKind.ADDRESS, Address.parse(s))
        if rep in (
            Representation.DECIMAL,
            Representation.DEGREE,
            Representation.PERCENTILE,
            Representation.NAME,
        ):
            return cls(ObjectKind.SAT, Sat.parse(s))
        if rep is Representation.HASH:
            return cls(ObjectKind.HASH, bytes.fromhex(s))
        if rep is Representation.INSCRIPTION_ID:
            return cls(ObjectKind.INSCRIPTION_ID, InscriptionId.parse(s))
        if rep is Representation.INTEGER:
            return cls(ObjectKind.INTEGER, _parse_u128(s))
        if rep is Representation.OUTPOINT:
            return cls(ObjectKind.OUTPOINT, OutPoint.parse(s))
        return cls(ObjectKind.SATPOINT, SatPoint.parse(s))