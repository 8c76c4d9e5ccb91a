import io

import pytest

from bitio import CompressorBitio


def _writer():
    stream = io.BytesIO()
    return stream, CompressorBitio.BitFile(stream, False)


def _reader(data):
    return CompressorBitio.BitFile(io.BytesIO(data), True)


def test_output_bits_msb_first():
    stream, out = _writer()
    out.output_bits(0b101, 3)
    out.output_bits(0b00001, 5)
    out.output_bits(0xABCD, 16)
    out.close_bit_file()
    assert stream.getvalue() == bytes([0b10100001, 0xAB, 0xCD])
    assert out.bits_written == 24


def test_close_pads_final_byte_with_zeros():
    stream, out = _writer()
    out.output_bit(1)
    out.output_bit(1)
    out.output_bits(1, 1)
    out.close_bit_file()
    assert stream.getvalue() == bytes([0b11100000])
    assert out.bits_written == 3


def test_zero_length_write_is_noop():
    stream, out = _writer()
    out.output_bits(0, 0)
    out.close_bit_file()
    assert stream.getvalue() == b""
    assert out.bits_written == 0


def test_input_bits_and_bit():
    bits = _reader(bytes([0b10110000, 0xFF]))
    assert bits.input_bit() == 1
    assert bits.input_bit() == 0
    assert bits.input_bits(2) == 0b11
    assert bits.input_bits(8) == 0b00001111
    assert bits.input_bits(4) == 0b1111
    assert bits.bits_read == 16


def test_zero_length_read_is_noop():
    bits = _reader(bytes([0xC0]))
    assert bits.input_bits(0) == 0
    assert bits.bits_read == 0
    assert bits.input_bits(2) == 0b11


def test_input_bits_crossing_bytes_32():
    bits = _reader(bytes([0xFA, 0xCE, 0x82, 0x01]))
    assert bits.input_bits(32) == 0xFACE8201


def test_end_of_file_raises_eof_error():
    bits = _reader(bytes([0x80]))
    assert bits.input_bits(8) == 0x80
    with pytest.raises(EOFError):
        bits.input_bit()


def test_short_read_raises_eof_error():
    bits = _reader(bytes([0x12]))
    with pytest.raises(EOFError):
        bits.input_bits(9)


def test_rewind_restarts_from_first_byte():
    bits = _reader(b"AB")
    assert bits.input_bits(3) == 0b010
    bits.rewind_bit_file()
    assert bits.input_bits(8) == ord("A")
    assert bits.input_bits(8) == ord("B")


def test_rewind_rejected_on_output():
    _, out = _writer()
    with pytest.raises(ValueError):
        out.rewind_bit_file()


def test_borrowed_stream_left_open():
    stream, out = _writer()
    out.output_bits(0xFF, 8)
    out.close_bit_file()
    assert not stream.closed


def test_named_files_are_owned(tmp_path):
    path = tmp_path / "bits.bin"
    out = CompressorBitio.BitFile.open_output_bit_file(str(path))
    out.output_bits(0x3, 2)
    out.close_bit_file()
    assert out.file_stream.closed
    assert path.read_bytes() == bytes([0b11000000])

    bits = CompressorBitio.BitFile.open_input_bit_file(path)
    assert bits.input_bits(2) == 0b11
    bits.close_bit_file()
    assert bits.file_stream.closed


def test_pacifier_prints_dots(capsys):
    stream = io.BytesIO()
    out = CompressorBitio.BitFile(stream, False, pacifier=True)
    for _ in range(CompressorBitio.PACIFIER_COUNT + 1):
        out.output_bits(0, 8)
    out.close_bit_file()
    assert capsys.readouterr().out == "."


def test_pacifier_off_by_default(capsys):
    _, out = _writer()
    for _ in range(CompressorBitio.PACIFIER_COUNT + 1):
        out.output_bits(0, 8)
    out.close_bit_file()
    assert capsys.readouterr().out == ""
