"""Ordinal theory: sat notation and rarity, inscription ids, sat points and inscription envelopes."""

__version__ = "0.1.0"