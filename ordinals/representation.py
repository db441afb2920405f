"""Recognising which notation a string is written in."""

from __future__ import annotations

import enum
import re


class Representation(enum.Enum):
    """Notations an object can be written in, tried in this order."""

    ADDRESS = r"^(bc|BC|tb|TB|bcrt|BCRT)1.*$"
    DECIMAL = r"^.*\..*$"
    DEGREE = r"^.*°.*′.*″(.*‴)?$"
    HASH = r"^[0-9a-fA-F]{64}$"
    INSCRIPTION_ID = r"^[0-9a-fA-F]{64}i\d+$"
    INTEGER = r"^[0-9]*$"
    NAME = r"^[a-z]{1,11}$"
    OUTPOINT = r"^[0-9a-fA-F]{64}:\d+$"
    PERCENTILE = r"^.*%$"
    SATPOINT = r"^[0-9a-fA-F]{64}:\d+:\d+$"

    @property
    def pattern(self) -> str:
        return self.value

    @classmethod
    def detect(cls, s: str) -> Representation:
        for representation in cls:
            if _COMPILED[representation].fullmatch(s):
                return representation
        raise ValueError("unrecognized object")


_COMPILED = {rep: re.compile(rep.value) for rep in Representation}