#Bradford Arrington 2025
import sys
from io import SEEK_SET
from typing import BinaryIO, Union


class CompressorBitio:
    PACIFIER_COUNT = 2047

    class BitFile:
        """MSB-first bit stream over a byte stream.

        A BitFile either opens the file itself (and closes it in
        close_bit_file) or borrows an already-open binary stream, which is
        flushed but left open for the caller.
        """

        def __init__(self, source: Union[str, BinaryIO], input_mode: bool, pacifier: bool = False):
            self.is_input = input_mode
            if isinstance(source, str) or hasattr(source, "__fspath__"):
                mode = "rb" if input_mode else "wb"
                self.file_stream: BinaryIO = open(source, mode)
                self.owns_stream = True
            else:
                self.file_stream = source
                self.owns_stream = False
            self.rack: int = 0
            self.mask: int = 0x80
            self.pacifier = pacifier
            self.pacifier_counter: int = 0
            self.bits_read: int = 0
            self.bits_written: int = 0

        @staticmethod
        def open_output_bit_file(name, pacifier: bool = False) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(name, False, pacifier)

        @staticmethod
        def open_input_bit_file(name, pacifier: bool = False) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(name, True, pacifier)

        def _pacify(self):
            self.pacifier_counter += 1
            if self.pacifier and (self.pacifier_counter & CompressorBitio.PACIFIER_COUNT) == 0:
                sys.stdout.write(".")
                sys.stdout.flush()

        def _flush_rack(self):
            try:
                self.file_stream.write(bytes([self.rack]))
            except OSError as e:
                raise OSError(f"Fatal error in OutputBit! {e}") from e
            self._pacify()
            self.rack = 0
            self.mask = 0x80

        def close_bit_file(self):
            if not self.is_input and self.mask != 0x80:
                # trailing bits of the last byte stay zero
                self._flush_rack()
            if self.owns_stream:
                self.file_stream.close()
            elif not self.is_input:
                self.file_stream.flush()

        def output_bit(self, bit: int):
            if bit != 0:
                self.rack |= self.mask
            self.mask >>= 1
            self.bits_written += 1
            if self.mask == 0:
                self._flush_rack()

        def output_bits(self, code: int, count: int):
            if count <= 0:
                return
            mask_code: int = 1 << (count - 1)
            while mask_code != 0:
                if (mask_code & code) != 0:
                    self.rack |= self.mask
                self.mask >>= 1
                if self.mask == 0:
                    self._flush_rack()
                mask_code >>= 1
            self.bits_written += count

        def _fill_rack(self):
            read = self.file_stream.read(1)
            if not read:
                raise EOFError("Fatal error in InputBit! End of file reached.")
            self.rack = read[0]
            self._pacify()

        def input_bit(self) -> int:
            if self.mask == 0x80:
                self._fill_rack()
            value = self.rack & self.mask
            self.mask >>= 1
            if self.mask == 0:
                self.mask = 0x80
            self.bits_read += 1
            return 1 if value != 0 else 0

        def input_bits(self, bit_count: int) -> int:
            """Read bit_count bits, first bit most significant.

            Raises EOFError when the stream ends before bit_count bits.
            """
            if bit_count <= 0:
                return 0
            mask_code: int = 1 << (bit_count - 1)
            return_value: int = 0
            while mask_code != 0:
                if self.mask == 0x80:
                    self._fill_rack()
                if (self.rack & self.mask) != 0:
                    return_value |= mask_code
                mask_code >>= 1
                self.mask >>= 1
                if self.mask == 0:
                    self.mask = 0x80
                self.bits_read += 1
            return return_value

        def rewind_bit_file(self):
            if not self.is_input:
                raise ValueError("Only input bit files can be rewound")
            self.file_stream.seek(0, SEEK_SET)
            self.rack = 0
            self.mask = 0x80
