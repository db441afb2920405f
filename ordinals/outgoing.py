"""What a send command transfers: an amount, an inscription or a sat point."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from .inscription_id import InscriptionId
from .sat_point import SatPoint

_U64_MAX = 2**64 - 1
_NUMBER_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?", re.ASCII)

_DENOMINATIONS = {
    "BTC": 8, "btc": 8,
    "mBTC": 5, "mbtc": 5,
    "uBTC": 2, "ubtc": 2,
    "nBTC": -1, "nbtc": -1,
    "pBTC": -4, "pbtc": -4,
    "bits": 2, "bit": 2,
    "satoshi": 0, "sat": 0,
    "msat": -3,
}


@dataclass(frozen=True, order=True)
class Amount:
    """An amount of bitcoin in satoshis."""

    sats: int

    def __str__(self) -> str:
        return f"{self.sats} sat"

    @classmethod
    def parse(cls, s: str) -> Amount:
        parts = s.split(" ")
        if len(parts) != 2:
            raise ValueError("amount must be of the form '<number> <denomination>'")
        number, denomination = parts
        if denomination not in _DENOMINATIONS:
            raise ValueError(f"unknown denomination: {denomination}")
        match = _NUMBER_RE.fullmatch(number)
        if not match or not (match.group(1) or match.group(2)):
            raise ValueError(f"invalid amount: {number}")
        whole, fraction = match.group(1), match.group(2) or ""
        digits = int(whole + fraction or "0")
        exponent = _DENOMINATIONS[denomination] - len(fraction)
        if exponent >= 0:
            sats = digits * 10**exponent
        else:
            sats, remainder = divmod(digits, 10**-exponent)
            if remainder:
                raise ValueError("amount too precise")
        if sats > _U64_MAX:
            raise ValueError("amount too big")
        return cls(sats)


class OutgoingKind(enum.Enum):
    AMOUNT = "amount"
    INSCRIPTION_ID = "inscription_id"
    SATPOINT = "satpoint"


@dataclass(frozen=True)
class Outgoing:
    kind: OutgoingKind
    value: object

    @classmethod
    def parse(cls, s: str) -> Outgoing:
        if ":" in s:
            return cls(OutgoingKind.SATPOINT, SatPoint.parse(s))
        if len(s.encode()) >= 66:
            return cls(OutgoingKind.INSCRIPTION_ID, InscriptionId.parse(s))
        if " " in s:
            return cls(OutgoingKind.AMOUNT, Amount.parse(s))
        index = next((i for i, c in enumerate(s) if c.isalpha()), None)
        if index is not None:
            s = s[:index] + " " + s[index:]
        return cls(OutgoingKind.AMOUNT, Amount.parse(s))