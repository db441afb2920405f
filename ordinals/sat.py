"""Sat numbering, ordinal notations and rarity."""

from __future__ import annotations

import bisect
import enum
import functools
import math
import re
from dataclasses import dataclass
from decimal import Decimal as _ExactDecimal
from typing import ClassVar

COIN_VALUE = 100_000_000
DIFFCHANGE_INTERVAL = 2016
SUBSIDY_HALVING_INTERVAL = 210_000
CYCLE_EPOCHS = 6
SUPPLY = 2_099_999_997_690_000

_FIRST_POST_SUBSIDY = 33
_U64_MAX = 2**64 - 1
_U64_RE = re.compile(r"\+?[0-9]+", re.ASCII)

DEGREE_SIGN = "\u00b0"
MINUTE_SIGN = "\u2032"
SECOND_SIGN = "\u2033"
THIRD_SIGN = "\u2034"


def _parse_u64(text: str) -> int:
    """Parse an unsigned 64-bit decimal integer, strictly."""
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _U64_RE.fullmatch(text):
        raise ValueError(f"invalid digit found in string: {text!r}")
    value = int(text)
    if value > _U64_MAX:
        raise ValueError("number too large to fit in target type")
    return value


def _parse_f64(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid float literal: {text!r}")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"invalid float literal: {text!r}") from None


def _format_float(value: float) -> str:
    """Shortest round-tripping positional notation, without a trailing '.0'."""
    text = format(_ExactDecimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _round_half_away(value: float) -> float:
    floor = math.floor(value)
    return float(floor + 1) if value - floor >= 0.5 else float(floor)


@functools.total_ordering
class _Count:
    """Shared comparison and conversion for counted quantities."""

    __slots__ = ()
    n: int

    def _other_value(self, other):
        if type(other) is type(self):
            return other.n
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    def __eq__(self, other):
        value = self._other_value(other)
        if value is None:
            return NotImplemented
        return self.n == value

    def __lt__(self, other):
        value = self._other_value(other)
        if value is None:
            return NotImplemented
        return self.n < value

    def __hash__(self):
        return hash(self.n)

    def __int__(self):
        return self.n

    def __index__(self):
        return self.n

    def __str__(self):
        return str(self.n)

    def __post_init__(self):
        if not isinstance(self.n, int) or isinstance(self.n, bool) or self.n < 0:
            raise ValueError(f"{type(self).__name__} must be a non-negative integer")


@dataclass(frozen=True, eq=False)
class Height(_Count):
    """A block height."""

    n: int

    def __add__(self, other: int) -> Height:
        if not isinstance(other, int):
            return NotImplemented
        return Height(self.n + other)

    def subsidy(self) -> int:
        return _epoch_of_height(self).subsidy()

    def starting_sat(self) -> Sat:
        epoch = _epoch_of_height(self)
        return epoch.starting_sat() + (self.n - epoch.starting_height().n) * epoch.subsidy()


@dataclass(frozen=True, eq=False)
class Epoch(_Count):
    """A subsidy halving epoch."""

    n: int

    def subsidy(self) -> int:
        if self.n < _FIRST_POST_SUBSIDY:
            return (50 * COIN_VALUE) >> self.n
        return 0

    def starting_sat(self) -> Sat:
        index = min(self.n, len(_STARTING_SAT_NUMBERS) - 1)
        return Sat(_STARTING_SAT_NUMBERS[index])

    def starting_height(self) -> Height:
        return Height(self.n * SUBSIDY_HALVING_INTERVAL)

    @classmethod
    def from_sat(cls, sat: Sat) -> Epoch:
        index = bisect.bisect_right(_STARTING_SAT_NUMBERS, sat.n) - 1
        return cls(min(index, _FIRST_POST_SUBSIDY))


def _epoch_of_height(height: Height) -> Epoch:
    return Epoch(height.n // SUBSIDY_HALVING_INTERVAL)


def _compute_starting_sats() -> tuple[int, ...]:
    totals = [0]
    for epoch in range(_FIRST_POST_SUBSIDY):
        totals.append(totals[-1] + Epoch(epoch).subsidy() * SUBSIDY_HALVING_INTERVAL)
    return tuple(totals)


_STARTING_SAT_NUMBERS = _compute_starting_sats()


def starting_sats() -> list[Sat]:
    """The first sat of every epoch, including the post-subsidy one."""
    return [Sat(n) for n in _STARTING_SAT_NUMBERS]


@dataclass(frozen=True)
class Degree:
    """Degree notation: cycle, epoch offset, period offset and block offset."""

    hour: int
    minute: int
    second: int
    third: int

    def __str__(self) -> str:
        return (
            f"{self.hour}{DEGREE_SIGN}{self.minute}{MINUTE_SIGN}"
            f"{self.second}{SECOND_SIGN}{self.third}{THIRD_SIGN}"
        )


@dataclass(frozen=True)
class Decimal:
    """Decimal notation: block height and offset within the block."""

    height: Height
    offset: int

    def __str__(self) -> str:
        return f"{self.height}.{self.offset}"


@functools.total_ordering
class Rarity(enum.Enum):
    """Rarity of a sat, from most to least common."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other):
        if not isinstance(other, Rarity):
            return NotImplemented
        members = list(Rarity)
        return members.index(self) < members.index(other)

    @classmethod
    def from_sat(cls, sat: Sat) -> Rarity:
        degree = sat.degree()
        hour, minute, second, third = degree.hour, degree.minute, degree.second, degree.third
        if hour == 0 and minute == 0 and second == 0 and third == 0:
            return cls.MYTHIC
        if minute == 0 and second == 0 and third == 0:
            return cls.LEGENDARY
        if minute == 0 and third == 0:
            return cls.EPIC
        if second == 0 and third == 0:
            return cls.RARE
        if third == 0:
            return cls.UNCOMMON
        return cls.COMMON

    @classmethod
    def parse(cls, s: str) -> Rarity:
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"invalid rarity: {s}") from None


@dataclass(frozen=True, eq=False)
class Sat(_Count):
    """A single satoshi, identified by its ordinal number."""

    n: int

    SUPPLY: ClassVar[int] = SUPPLY
    LAST: ClassVar[Sat]

    def __add__(self, other: int) -> Sat:
        if not isinstance(other, int):
            return NotImplemented
        return Sat(self.n + other)

    def degree(self) -> Degree:
        height = self.height().n
        return Degree(
            hour=self.cycle(),
            minute=height % SUBSIDY_HALVING_INTERVAL,
            second=height % DIFFCHANGE_INTERVAL,
            third=self.third(),
        )

    def height(self) -> Height:
        epoch = self.epoch()
        return epoch.starting_height() + self.epoch_position() // epoch.subsidy()

    def cycle(self) -> int:
        return self.epoch().n // CYCLE_EPOCHS

    def percentile(self) -> str:
        value = (float(self.n) / float(Sat.LAST.n)) * 100.0
        return f"{_format_float(value)}%"

    def epoch(self) -> Epoch:
        return Epoch.from_sat(self)

    def period(self) -> int:
        return self.height().n // DIFFCHANGE_INTERVAL

    def third(self) -> int:
        return self.epoch_position() % self.epoch().subsidy()

    def epoch_position(self) -> int:
        return self.n - self.epoch().starting_sat().n

    def decimal(self) -> Decimal:
        return Decimal(height=self.height(), offset=self.third())

    def rarity(self) -> Rarity:
        return Rarity.from_sat(self)

    def is_common(self) -> bool:
        """Fast check equivalent to ``rarity() is Rarity.COMMON``."""
        epoch = self.epoch()
        return (self.n - epoch.starting_sat().n) % epoch.subsidy() != 0

    def name(self) -> str:
        x = SUPPLY - self.n
        letters = []
        while x > 0:
            letters.append("abcdefghijklmnopqrstuvwxyz"[(x - 1) % 26])
            x = (x - 1) // 26
        return "".join(reversed(letters))

    @classmethod
    def parse(cls, s: str) -> Sat:
        """Parse a sat from integer, name, degree, percentile or decimal notation."""
        if any("a" <= c <= "z" for c in s):
            return cls._from_name(s)
        if DEGREE_SIGN in s:
            return cls._from_degree(s)
        if "%" in s:
            return cls._from_percentile(s)
        if "." in s:
            return cls._from_decimal(s)
        sat = cls(_parse_u64(s))
        if sat > Sat.LAST:
            raise ValueError("invalid sat")
        return sat

    @classmethod
    def _from_name(cls, s: str) -> Sat:
        x = 0
        for c in s:
            if not "a" <= c <= "z":
                raise ValueError(f"invalid character in sat name: {c}")
            x = x * 26 + ord(c) - ord("a") + 1
        if x > SUPPLY:
            raise ValueError("sat name out of range")
        return cls(SUPPLY - x)

    @classmethod
    def _from_degree(cls, degree: str) -> Sat:
        cycle_text, sep, rest = degree.partition(DEGREE_SIGN)
        if not sep:
            raise ValueError("missing degree symbol")
        cycle_number = _parse_u64(cycle_text)

        epoch_text, sep, rest = rest.partition(MINUTE_SIGN)
        if not sep:
            raise ValueError("missing minute symbol")
        epoch_offset = _parse_u64(epoch_text)
        if epoch_offset >= SUBSIDY_HALVING_INTERVAL:
            raise ValueError("invalid epoch offset")

        period_text, sep, rest = rest.partition(SECOND_SIGN)
        if not sep:
            raise ValueError("missing second symbol")
        period_offset = _parse_u64(period_text)
        if period_offset >= DIFFCHANGE_INTERVAL:
            raise ValueError("invalid period offset")

        cycle_start_epoch = cycle_number * CYCLE_EPOCHS
        halving_increment = SUBSIDY_HALVING_INTERVAL % DIFFCHANGE_INTERVAL

        # Valid degrees shift this relationship by 336 every halving.
        relationship = period_offset + SUBSIDY_HALVING_INTERVAL * CYCLE_EPOCHS - epoch_offset
        if relationship % halving_increment != 0:
            raise ValueError(
                "relationship between epoch offset and period offset must be multiple of 336"
            )

        epochs_since_cycle_start = relationship % DIFFCHANGE_INTERVAL // halving_increment
        epoch = cycle_start_epoch + epochs_since_cycle_start
        height = Height(epoch * SUBSIDY_HALVING_INTERVAL + epoch_offset)

        block_text, sep, trailing = rest.partition(THIRD_SIGN)
        if sep:
            block_offset = _parse_u64(block_text)
            rest = trailing
        else:
            block_offset = 0

        if rest:
            raise ValueError("trailing characters")
        if block_offset >= height.subsidy():
            raise ValueError("invalid block offset")

        return height.starting_sat() + block_offset

    @classmethod
    def _from_decimal(cls, decimal: str) -> Sat:
        height_text, sep, offset_text = decimal.partition(".")
        if not sep:
            raise ValueError("missing period")
        height = Height(_parse_u64(height_text))
        offset = _parse_u64(offset_text)
        if offset >= height.subsidy():
            raise ValueError("invalid block offset")
        return height.starting_sat() + offset

    @classmethod
    def _from_percentile(cls, percentile: str) -> Sat:
        if not percentile.endswith("%"):
            raise ValueError(f"invalid percentile: {percentile}")
        value = _parse_f64(percentile[:-1])
        if value < 0.0:
            raise ValueError(f"invalid percentile: {_format_float(value)}")
        last = float(Sat.LAST.n)
        if math.isnan(value):
            return cls(0)
        n = _round_half_away(value / 100.0 * last)
        if n > last:
            raise ValueError(f"invalid percentile: {_format_float(value)}")
        return cls(int(n))


Sat.LAST = Sat(SUPPLY - 1)