import pytest

from ordinals.inscription import (
    OP_CHECKSIG,
    OP_ENDIF,
    OP_FALSE,
    OP_IF,
    Inscription,
    InscriptionError,
    InscriptionErrorKind,
    Instruction,
    ScriptBuilder,
    ScriptError,
    Transaction,
    TransactionInscription,
    TxIn,
    parse_script,
    parse_witness,
)
from ordinals.media import Media

TEXT = b"text/plain;charset=utf-8"


def envelope(payload):
    builder = ScriptBuilder().push_opcode(OP_FALSE).push_opcode(OP_IF)
    for data in payload:
        builder.push_slice(data)
    builder.push_opcode(OP_ENDIF)
    return [builder.to_bytes(), b""]


def inscription(content_type, body):
    return Inscription(content_type=content_type.encode(), body=bytes(body))


def transaction_inscription(content_type, body, index, offset):
    return TransactionInscription(inscription(content_type, body), index, offset)


def error_kind(witness):
    with pytest.raises(InscriptionError) as info:
        parse_witness(witness)
    return info.value.kind


def test_empty():
    assert error_kind([]) is InscriptionErrorKind.EMPTY_WITNESS


def test_ignore_key_path_spends():
    assert error_kind([b""]) is InscriptionErrorKind.KEY_PATH_SPEND


def test_ignore_key_path_spends_with_annex():
    assert error_kind([b"", b"\x50"]) is InscriptionErrorKind.KEY_PATH_SPEND


def test_ignore_unparsable_scripts():
    with pytest.raises(InscriptionError) as info:
        parse_witness([b"\x01", b""])
    assert info.value.kind is InscriptionErrorKind.SCRIPT
    assert isinstance(info.value.script_error, ScriptError)
    assert str(info.value.script_error) == "unexpected end of script"


def test_no_inscription():
    assert parse_witness([b"", b""]) == []


def test_duplicate_field():
    witness = envelope([b"ord", b"\x01", TEXT, b"\x01", TEXT, b"", b"ord"])
    assert error_kind(witness) is InscriptionErrorKind.INVALID_INSCRIPTION


def test_valid():
    witness = envelope([b"ord", b"\x01", TEXT, b"", b"ord"])
    assert parse_witness(witness) == [inscription("text/plain;charset=utf-8", b"ord")]


def test_valid_with_unknown_tag():
    witness = envelope([b"ord", b"\x01", TEXT, b"\x03", b"bar", b"", b"ord"])
    assert parse_witness(witness) == [inscription("text/plain;charset=utf-8", b"ord")]


def test_no_content_tag():
    witness = envelope([b"ord", b"\x01", TEXT])
    assert parse_witness(witness) == [Inscription(content_type=TEXT, body=None)]


def test_no_content_type():
    witness = envelope([b"ord", b"", b"foo"])
    assert parse_witness(witness) == [Inscription(content_type=None, body=b"foo")]


def test_valid_body_in_multiple_pushes():
    witness = envelope([b"ord", b"\x01", TEXT, b"", b"foo", b"bar"])
    assert parse_witness(witness) == [inscription("text/plain;charset=utf-8", b"foobar")]


def test_valid_body_in_zero_pushes():
    witness = envelope([b"ord", b"\x01", TEXT, b""])
    assert parse_witness(witness) == [inscription("text/plain;charset=utf-8", b"")]


def test_valid_body_in_multiple_empty_pushes():
    witness = envelope([b"ord", b"\x01", TEXT] + [b""] * 6)
    assert parse_witness(witness) == [inscription("text/plain;charset=utf-8", b"")]


def test_valid_ignore_trailing():
    script = (
        ScriptBuilder()
        .push_opcode(OP_FALSE)
        .push_opcode(OP_IF)
        .push_slice(b"ord")
        .push_slice(b"\x01")
        .push_slice(TEXT)
        .push_slice(b"")
        .push_slice(b"ord")
        .push_opcode(OP_ENDIF)
        .push_opcode(OP_CHECKSIG)
        .to_bytes()
    )
    assert parse_witness([script, b""]) == [inscription("text/plain;charset=utf-8", b"ord")]


def test_valid_ignore_preceding():
    script = (
        ScriptBuilder()
        .push_opcode(OP_CHECKSIG)
        .push_opcode(OP_FALSE)
        .push_opcode(OP_IF)
        .push_slice(b"ord")
        .push_slice(b"\x01")
        .push_slice(TEXT)
        .push_slice(b"")
        .push_slice(b"ord")
        .push_opcode(OP_ENDIF)
        .to_bytes()
    )
    assert parse_witness([script, b""]) == [inscription("text/plain;charset=utf-8", b"ord")]


def test_do_not_ignore_inscriptions_after_first():
    builder = ScriptBuilder()
    for body in (b"foo", b"bar"):
        (
            builder.push_opcode(OP_FALSE)
            .push_opcode(OP_IF)
            .push_slice(b"ord")
            .push_slice(b"\x01")
            .push_slice(TEXT)
            .push_slice(b"")
            .push_slice(body)
            .push_opcode(OP_ENDIF)
        )
    assert parse_witness([builder.to_bytes(), b""]) == [
        inscription("text/plain;charset=utf-8", b"foo"),
        inscription("text/plain;charset=utf-8", b"bar"),
    ]


def test_invalid_utf8_does_not_render_inscription_invalid():
    witness = envelope([b"ord", b"\x01", TEXT, b"", bytes([0b10000000])])
    assert parse_witness(witness) == [
        inscription("text/plain;charset=utf-8", bytes([0b10000000]))
    ]


def test_no_endif():
    script = ScriptBuilder().push_opcode(OP_FALSE).push_opcode(OP_IF).push_slice(b"ord").to_bytes()
    assert parse_witness([script, b""]) == []


def test_no_op_false():
    script = ScriptBuilder().push_opcode(OP_IF).push_slice(b"ord").push_opcode(OP_ENDIF).to_bytes()
    assert parse_witness([script, b""]) == []


def test_empty_envelope():
    assert parse_witness(envelope([])) == []


def test_wrong_magic_number():
    assert parse_witness(envelope([b"foo"])) == []


def test_extract_from_transaction():
    tx = Transaction(inputs=[TxIn(witness=envelope([b"ord", b"\x01", TEXT, b"", b"ord"]))])
    assert Inscription.from_transaction(tx) == [
        transaction_inscription("text/plain;charset=utf-8", b"ord", 0, 0)
    ]


def test_extract_from_second_input():
    tx = Transaction(
        inputs=[
            TxIn(witness=[]),
            TxIn(witness=inscription("foo", b"\x01" * 1040).to_witness()),
        ]
    )
    assert Inscription.from_transaction(tx) == [
        transaction_inscription("foo", b"\x01" * 1040, 1, 0)
    ]


def test_extract_from_second_envelope():
    builder = ScriptBuilder()
    inscription("foo", b"\x01" * 100).append_reveal_script(builder)
    script = inscription("bar", b"\x01" * 100).append_reveal_script(builder)
    tx = Transaction(inputs=[TxIn(witness=[script, b""])])
    assert Inscription.from_transaction(tx) == [
        transaction_inscription("foo", b"\x01" * 100, 0, 0),
        transaction_inscription("bar", b"\x01" * 100, 0, 1),
    ]


def test_inscribe_png():
    witness = envelope([b"ord", b"\x01", b"image/png", b"", b"\x01" * 100])
    assert parse_witness(witness) == [inscription("image/png", b"\x01" * 100)]


@pytest.mark.parametrize(
    "size, count",
    [(0, 7), (1, 8), (520, 8), (521, 9), (1040, 9), (1041, 10)],
)
def test_reveal_script_chunks_data(size, count):
    script = inscription("foo", bytes(size)).append_reveal_script(ScriptBuilder())
    assert len(list(parse_script(script))) == count


def test_chunked_data_is_parsable():
    script = inscription("foo", b"\x01" * 1040).append_reveal_script(ScriptBuilder())
    assert parse_witness([script, b""]) == [inscription("foo", b"\x01" * 1040)]


def test_round_trip_with_no_fields():
    script = Inscription().append_reveal_script(ScriptBuilder())
    assert parse_witness([script, b""]) == [Inscription(content_type=None, body=None)]


def test_unknown_odd_fields_are_ignored():
    assert parse_witness(envelope([b"ord", b"\x03", b"\x00"])) == [Inscription()]


def test_unknown_even_fields_are_invalid():
    witness = envelope([b"ord", b"\x02", b"\x00"])
    assert error_kind(witness) is InscriptionErrorKind.UNRECOGNIZED_EVEN_FIELD


def test_parse_script_pushdata_forms():
    script = (
        ScriptBuilder()
        .push_slice(b"\xaa" * 100)
        .push_slice(b"\xbb" * 300)
        .push_opcode(OP_CHECKSIG)
        .to_bytes()
    )
    assert script[0] == 0x4C
    assert list(parse_script(script)) == [
        Instruction.push(b"\xaa" * 100),
        Instruction.push(b"\xbb" * 300),
        Instruction.op(OP_CHECKSIG),
    ]


def test_parse_script_truncated_pushdata():
    with pytest.raises(ScriptError):
        list(parse_script(b"\x4c"))
    with pytest.raises(ScriptError):
        list(parse_script(b"\x4c\x05\x01"))


def test_empty_push_is_op_false():
    assert ScriptBuilder().push_slice(b"").to_bytes() == bytes([OP_FALSE])
    assert list(parse_script(b"\x00")) == [Instruction.push(b"")]


def test_media_and_content():
    png = inscription("image/png", b"\x01\x02")
    assert png.media() is Media.IMAGE
    assert png.content_length() == 2
    assert png.content_type_str() == "image/png"
    assert Inscription(content_type=b"image/png").media() is Media.UNKNOWN
    assert Inscription(content_type=b"image/png").content_length() is None
    assert inscription("foo/bar", b"x").media() is Media.UNKNOWN
    assert Inscription(body=b"x").media() is Media.UNKNOWN
    assert Inscription(content_type=b"\xff").content_type_str() is None


def test_to_witness_round_trip():
    original = inscription("text/plain;charset=utf-8", b"hello")
    witness = original.to_witness()
    assert witness[1] == b""
    assert parse_witness(witness) == [original]


def test_from_file(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello")
    loaded = Inscription.from_file(path)
    assert loaded == Inscription(content_type=TEXT, body=b"hello")


def test_from_file_limit(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello")
    assert Inscription.from_file(path, 5).body == b"hello"
    with pytest.raises(ValueError, match="content size of 5 bytes exceeds 4 byte limit"):
        Inscription.from_file(path, 4)


def test_from_file_missing(tmp_path):
    with pytest.raises(OSError, match="io error reading"):
        Inscription.from_file(tmp_path / "missing.txt")


def test_from_file_unsupported_extension(tmp_path):
    path = tmp_path / "data.foo"
    path.write_bytes(b"x")
    with pytest.raises(ValueError, match="unsupported file extension"):
        Inscription.from_file(path)