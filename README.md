# ordinals

Tools for ordinal theory. The package numbers, names and classifies
individual satoshis. It parses inscription ids, outpoints, sat points,
addresses and amounts. It also builds inscription reveal scripts and reads
inscriptions back out of transaction witnesses.

## Installation

    pip install .

## Command line

    ordinals epochs          # first sat of every reward epoch, as JSON
    ordinals parse 1.1       # parse any ordinal notation, print it as JSON
    ordinals parse nvtdijuwxlp

`parse` prints `{"object": "<value>"}`. If the text cannot be parsed, it
writes an `error:` line and any `because:` lines to stderr and exits with
status 1.

## Library

    from ordinals.sat import Sat, Rarity

    sat = Sat.parse("0°0′336″0‴")
    sat.name()       # sat name
    sat.degree()     # Degree(hour, minute, second, third)
    sat.decimal()    # Decimal(height, offset)
    sat.rarity()     # Rarity.EPIC

`Sat.parse` accepts these notations:

- an integer
- a decimal, written `height.offset`
- a degree, written `cycle°minute′second″third‴`
- a percentile, such as `50%`
- a name, from `a` to `nvtdijuwxlp`

`ordinals.sat` also provides `Height`, `Epoch` and `starting_sats()`.

Other modules:

- `ordinals.inscription_id`: `InscriptionId.parse("<txid>i<index>")`. It raises `InscriptionIdError` on bad input.
- `ordinals.sat_point`: `OutPoint` and `SatPoint`, with `parse`. `SatPoint` also has `encode` and `decode` for the 44-byte binary form.
- `ordinals.representation`: `Representation.detect` tells which notation a string is written in.
- `ordinals.obj`: `Object.parse` recognises these:
  - bech32/bech32m segwit addresses
  - 32-byte hashes
  - inscription ids
  - integers
  - outpoints
  - sat points
  - sats
- `ordinals.outgoing`: `Outgoing.parse` accepts an amount (`Amount`, for example `10 sat` or `1btc`), an inscription id or a sat point.
- `ordinals.media`: the `Media` kinds and `content_type_for_path`. `check_mp4_codec` rejects MP4 video that is not H.264.
- `ordinals.inscription`:
  - `Inscription`, with `append_reveal_script`, `to_witness`, `from_file` and `from_transaction`
  - `parse_witness`
  - `ScriptBuilder` and `parse_script`, for working with raw scripts
- `ordinals.cli`: `list_ranges(outpoint, ranges)` describes sat ranges, giving each range's size and the rarity and name of its first sat.

## What it does not do

There is no blockchain index, no wallet and no explorer server. The package
does not connect to a node and does not locate sats on chain. It does not
create or sign transactions. The only commands are `epochs` and `parse`.

## Tests

    pip install .[test]
    pytest