"""Inscriptions carried in taproot script-path witnesses."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .media import Media, content_type_for_path

OP_FALSE = 0x00
OP_PUSHBYTES_75 = 0x4B
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_IF = 0x63
OP_ENDIF = 0x68
OP_CHECKSIG = 0xAC

TAPROOT_ANNEX_PREFIX = 0x50
MAX_CHUNK_SIZE = 520

PROTOCOL_ID = b"ord"
BODY_TAG = b""
CONTENT_TYPE_TAG = b"\x01"

_PUSHDATA_WIDTHS = {OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4}


class ScriptError(ValueError):
    """Raised when a script ends in the middle of a data push."""

    def __init__(self, message: str = "unexpected end of script") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Instruction:
    """One script instruction: a data push, or a non-push opcode."""

    data: bytes | None = None
    opcode: int | None = None

    @classmethod
    def push(cls, data) -> Instruction:
        return cls(data=bytes(data))

    @classmethod
    def op(cls, opcode: int) -> Instruction:
        return cls(opcode=opcode)

    @property
    def is_push(self) -> bool:
        return self.data is not None


_ENVELOPE_HEADER = (
    Instruction.push(b""),
    Instruction.op(OP_IF),
    Instruction.push(PROTOCOL_ID),
)
_ENDIF = Instruction.op(OP_ENDIF)


def parse_script(script) -> Iterator[Instruction]:
    """Yield the instructions of a script, raising ScriptError on a truncated push."""
    data = bytes(script)
    end = len(data)
    pos = 0
    while pos < end:
        opcode = data[pos]
        pos += 1
        if opcode <= OP_PUSHBYTES_75:
            size = opcode
        elif opcode in _PUSHDATA_WIDTHS:
            width = _PUSHDATA_WIDTHS[opcode]
            if pos + width > end:
                raise ScriptError()
            size = int.from_bytes(data[pos:pos + width], "little")
            pos += width
        else:
            yield Instruction.op(opcode)
            continue
        if pos + size > end:
            raise ScriptError()
        yield Instruction.push(data[pos:pos + size])
        pos += size


class ScriptBuilder:
    """Accumulates opcodes and data pushes into a script."""

    def __init__(self) -> None:
        self._script = bytearray()

    def push_opcode(self, opcode: int) -> ScriptBuilder:
        self._script.append(opcode)
        return self

    def push_slice(self, data) -> ScriptBuilder:
        data = bytes(data)
        size = len(data)
        if size < OP_PUSHDATA1:
            self._script.append(size)
        elif size < 0x100:
            self._script.append(OP_PUSHDATA1)
            self._script += size.to_bytes(1, "little")
        elif size < 0x10000:
            self._script.append(OP_PUSHDATA2)
            self._script += size.to_bytes(2, "little")
        elif size < 0x100000000:
            self._script.append(OP_PUSHDATA4)
            self._script += size.to_bytes(4, "little")
        else:
            raise ValueError("push of 4GB or more does not fit in a script")
        self._script += data
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._script)


class InscriptionErrorKind(enum.Enum):
    EMPTY_WITNESS = "empty witness"
    INVALID_INSCRIPTION = "invalid inscription"
    KEY_PATH_SPEND = "key path spend"
    NO_INSCRIPTION = "no inscription"
    SCRIPT = "script error"
    UNRECOGNIZED_EVEN_FIELD = "unrecognized even field"


class InscriptionError(ValueError):
    """Raised when a witness holds no valid inscriptions."""

    def __init__(self, kind: InscriptionErrorKind, script_error: ScriptError | None = None) -> None:
        self.kind = kind
        self.script_error = script_error
        message = kind.value if script_error is None else f"{kind.value}: {script_error}"
        super().__init__(message)


@dataclass(frozen=True)
class Inscription:
    """An inscription's content type and body, each optional."""

    content_type: bytes | None = None
    body: bytes | None = None

    @classmethod
    def from_transaction(cls, tx: Transaction) -> list[TransactionInscription]:
        """All inscriptions in a transaction's inputs; inputs that fail to parse are skipped."""
        result = []
        for index, tx_in in enumerate(tx.inputs):
            try:
                inscriptions = parse_witness(tx_in.witness)
            except InscriptionError:
                continue
            result.extend(
                TransactionInscription(inscription, index, offset)
                for offset, inscription in enumerate(inscriptions)
            )
        return result

    @classmethod
    def from_file(cls, path, limit: int | None = None) -> Inscription:
        """Read an inscription from a file, enforcing an optional size limit."""
        path = Path(path)
        try:
            body = path.read_bytes()
        except OSError as err:
            raise OSError(f"io error reading {path}") from err
        if limit is not None and len(body) > limit:
            raise ValueError(
                f"content size of {len(body)} bytes exceeds {limit} byte limit for inscriptions"
            )
        content_type = content_type_for_path(path)
        return cls(content_type=content_type.encode(), body=body)

    def _append_to_builder(self, builder: ScriptBuilder) -> ScriptBuilder:
        builder.push_opcode(OP_FALSE).push_opcode(OP_IF).push_slice(PROTOCOL_ID)
        if self.content_type is not None:
            builder.push_slice(CONTENT_TYPE_TAG).push_slice(self.content_type)
        if self.body is not None:
            builder.push_slice(BODY_TAG)
            for start in range(0, len(self.body), MAX_CHUNK_SIZE):
                builder.push_slice(self.body[start:start + MAX_CHUNK_SIZE])
        return builder.push_opcode(OP_ENDIF)

    def append_reveal_script(self, builder: ScriptBuilder) -> bytes:
        """Append the inscription envelope to a builder and return the whole script."""
        return self._append_to_builder(builder).to_bytes()

    def media(self) -> Media:
        if self.body is None:
            return Media.UNKNOWN
        content_type = self.content_type_str()
        if content_type is None:
            return Media.UNKNOWN
        try:
            return Media.parse(content_type)
        except ValueError:
            return Media.UNKNOWN

    def content_length(self) -> int | None:
        return None if self.body is None else len(self.body)

    def content_type_str(self) -> str | None:
        if self.content_type is None:
            return None
        try:
            return self.content_type.decode("utf-8")
        except UnicodeDecodeError:
            return None

    def to_witness(self) -> list[bytes]:
        return [self.append_reveal_script(ScriptBuilder()), b""]


@dataclass(frozen=True)
class TransactionInscription:
    inscription: Inscription
    tx_in_index: int
    tx_in_offset: int


@dataclass
class TxIn:
    witness: list[bytes] = field(default_factory=list)
    script_sig: bytes = b""
    sequence: int = 0


@dataclass
class Transaction:
    inputs: list[TxIn] = field(default_factory=list)
    outputs: list = field(default_factory=list)
    version: int = 0
    lock_time: int = 0


_NOTHING = object()


class _Parser:
    def __init__(self, script: bytes) -> None:
        self._instructions = parse_script(script)
        self._peeked = _NOTHING

    def _next(self) -> Instruction | None:
        if self._peeked is not _NOTHING:
            item, self._peeked = self._peeked, _NOTHING
            if isinstance(item, ScriptError):
                raise item
            return item
        return next(self._instructions, None)

    def _peek(self):
        if self._peeked is _NOTHING:
            try:
                self._peeked = next(self._instructions, None)
            except ScriptError as err:
                self._peeked = err
        return self._peeked

    def _advance(self) -> Instruction:
        try:
            item = self._next()
        except ScriptError as err:
            raise InscriptionError(InscriptionErrorKind.SCRIPT, err) from None
        if item is None:
            raise InscriptionError(InscriptionErrorKind.NO_INSCRIPTION)
        return item

    def _accept(self, instruction: Instruction) -> bool:
        item = self._peek()
        if isinstance(item, ScriptError):
            raise InscriptionError(InscriptionErrorKind.SCRIPT, item)
        if item is not None and item == instruction:
            self._advance()
            return True
        return False

    def _expect_push(self) -> bytes:
        item = self._advance()
        if not item.is_push:
            raise InscriptionError(InscriptionErrorKind.INVALID_INSCRIPTION)
        return item.data

    def _match_header(self) -> bool:
        return all(self._advance() == expected for expected in _ENVELOPE_HEADER)

    def _enter_envelope(self) -> None:
        while not self._match_header():
            pass

    def parse_one(self) -> Inscription:
        self._enter_envelope()
        fields: dict[bytes, bytes] = {}
        while True:
            item = self._advance()
            if item.data == BODY_TAG:
                body = bytearray()
                while not self._accept(_ENDIF):
                    body += self._expect_push()
                fields[BODY_TAG] = bytes(body)
                break
            if item.is_push:
                if item.data in fields:
                    raise InscriptionError(InscriptionErrorKind.INVALID_INSCRIPTION)
                fields[item.data] = self._expect_push()
            elif item == _ENDIF:
                break
            else:
                raise InscriptionError(InscriptionErrorKind.INVALID_INSCRIPTION)

        body = fields.pop(BODY_TAG, None)
        content_type = fields.pop(CONTENT_TYPE_TAG, None)
        if any(tag and tag[0] % 2 == 0 for tag in fields):
            raise InscriptionError(InscriptionErrorKind.UNRECOGNIZED_EVEN_FIELD)
        return Inscription(content_type=content_type, body=body)

    def parse_all(self) -> list[Inscription]:
        results: list[Inscription | InscriptionError] = []
        while True:
            try:
                results.append(self.parse_one())
            except InscriptionError as err:
                if err.kind is InscriptionErrorKind.NO_INSCRIPTION:
                    break
                results.append(err)
        for result in results:
            if isinstance(result, InscriptionError):
                raise result
        return results


def parse_witness(witness) -> list[Inscription]:
    """Parse every inscription in a script-path spend witness."""
    elements = [bytes(element) for element in witness]
    if not elements:
        raise InscriptionError(InscriptionErrorKind.EMPTY_WITNESS)
    if len(elements) == 1:
        raise InscriptionError(InscriptionErrorKind.KEY_PATH_SPEND)
    last = elements[-1]
    annex = bool(last) and last[0] == TAPROOT_ANNEX_PREFIX
    if len(elements) == 2 and annex:
        raise InscriptionError(InscriptionErrorKind.KEY_PATH_SPEND)
    script = elements[-1] if annex else elements[-2]
    return _Parser(script).parse_all()