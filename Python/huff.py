#Brad Arrington
"""Static order 0 Huffman coder with the code tree stored in the header.

Compressed layout, bit for bit:

    32 bits   HUFF_TREE magic number
    header    preorder tree: 0 = internal node (left, then right subtree),
              1 = leaf followed by its symbol in 9 bits
    payload   Huffman code of every input byte, then the END_OF_STREAM code
    padding   zero bits up to the next byte boundary

Nodes live in a Tree arena: indices 0..256 are the leaves (the index is
the symbol), internal nodes are numbered from 257 upward.
"""
import heapq
from io import BytesIO

from bitio import CompressorBitio

BITS_PER_WORD = 8
BITS_PER_INT = 32
SYMBOL_BITS = 9
ALPH_SIZE = 1 << BITS_PER_WORD
END_OF_STREAM = ALPH_SIZE
SYMBOL_COUNT = ALPH_SIZE + 1
NODE_TABLE_COUNT = SYMBOL_COUNT * 2 - 1
HUFF_NUMBER = 0xFACE8200
HUFF_TREE = HUFF_NUMBER | 1

COMPRESSION_NAME = "static order 0 model with Huffman coding, tree header"
USAGE = "infile outfile [-d]\n\nSpecifying -d will dump the modeling data\n"


class HuffError(Exception):
    pass


class BadMagicError(HuffError):
    pass


class CorruptHeaderError(HuffError):
    pass


class TruncatedStreamError(HuffError):
    pass


class Node:
    __slots__ = ("weight", "child_0", "child_1")

    def __init__(self):
        self.weight = 0
        self.child_0 = 0
        self.child_1 = 0


class Tree:
    def __init__(self):
        self.nodes = [Node() for _ in range(NODE_TABLE_COUNT)]
        self.next_free = SYMBOL_COUNT
        self.root = END_OF_STREAM

    @staticmethod
    def is_leaf(node: int) -> bool:
        return node <= END_OF_STREAM

    def new_internal_node(self) -> int:
        if self.next_free >= NODE_TABLE_COUNT:
            raise IndexError("Huffman tree node table is full")
        node = self.next_free
        self.next_free += 1
        return node

    def walk(self):
        """Yield node indices in preorder, left child before right."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if not self.is_leaf(node):
                stack.append(self.nodes[node].child_1)
                stack.append(self.nodes[node].child_0)

    def leaves(self) -> list[int]:
        return [node for node in self.walk() if self.is_leaf(node)]


class Code:
    __slots__ = ("code", "code_bits")

    def __init__(self, code: int = 0, code_bits: int = 0):
        self.code = code
        self.code_bits = code_bits

    def __str__(self):
        if self.code_bits == 0:
            return ""
        return f"{self.code:0{self.code_bits}b}"

    def __repr__(self):
        return f"Code('{self}')"


def count_bytes(input_bit_file: 'CompressorBitio.BitFile') -> list[int]:
    input_bit_file.rewind_bit_file()
    counts = [0] * SYMBOL_COUNT
    while True:
        try:
            c = input_bit_file.input_bits(BITS_PER_WORD)
        except EOFError:
            break
        counts[c] += 1
    counts[END_OF_STREAM] = 1
    input_bit_file.rewind_bit_file()
    return counts


def build_tree(counts) -> Tree:
    """Merge the two lightest nodes until one is left.

    Ties go to the lower node index, so leaves (by symbol) come before
    internal nodes and older internal nodes before newer ones.
    """
    tree = Tree()
    queue = []
    for symbol in range(SYMBOL_COUNT):
        if counts[symbol] > 0:
            tree.nodes[symbol].weight = counts[symbol]
            queue.append((counts[symbol], symbol))
    if not queue:
        raise ValueError("Cannot build a Huffman tree without symbols")
    heapq.heapify(queue)

    while len(queue) > 1:
        weight_0, child_0 = heapq.heappop(queue)
        weight_1, child_1 = heapq.heappop(queue)
        next_free = tree.new_internal_node()
        tree.nodes[next_free].weight = weight_0 + weight_1
        tree.nodes[next_free].child_0 = child_0
        tree.nodes[next_free].child_1 = child_1
        heapq.heappush(queue, (weight_0 + weight_1, next_free))

    tree.root = queue[0][1]
    return tree


def convert_tree_to_code(tree: Tree) -> list:
    """Return a list indexed by symbol; symbols absent from the tree map to None."""
    codes = [None] * SYMBOL_COUNT
    _convert_node(tree, codes, 0, 0, tree.root)
    return codes


def _convert_node(tree, codes, code_so_far, bits, node):
    if tree.is_leaf(node):
        codes[node] = Code(code_so_far, bits)
        return

    code_so_far <<= 1
    bits += 1
    _convert_node(tree, codes, code_so_far, bits, tree.nodes[node].child_0)
    _convert_node(tree, codes, code_so_far | 1, bits, tree.nodes[node].child_1)


def output_tree(output_bit_file: 'CompressorBitio.BitFile', tree: Tree, node: int = None):
    if node is None:
        node = tree.root
    if tree.is_leaf(node):
        output_bit_file.output_bit(1)
        output_bit_file.output_bits(node, SYMBOL_BITS)
        return

    output_bit_file.output_bit(0)
    output_tree(output_bit_file, tree, tree.nodes[node].child_0)
    output_tree(output_bit_file, tree, tree.nodes[node].child_1)


def input_tree(input_bit_file: 'CompressorBitio.BitFile') -> Tree:
    tree = Tree()
    symbols = set()
    try:
        tree.root = _input_node(input_bit_file, tree, symbols)
    except EOFError as e:
        raise CorruptHeaderError("Header ended before the code tree was complete") from e
    if END_OF_STREAM not in symbols:
        raise CorruptHeaderError("Header tree has no END_OF_STREAM leaf")
    return tree


def _input_node(input_bit_file, tree, symbols) -> int:
    if input_bit_file.input_bit():
        symbol = input_bit_file.input_bits(SYMBOL_BITS)
        if symbol > END_OF_STREAM:
            raise CorruptHeaderError(f"Header leaf symbol {symbol} out of range")
        if symbol in symbols:
            raise CorruptHeaderError(f"Header leaf symbol {symbol} appears twice")
        symbols.add(symbol)
        return symbol

    try:
        node = tree.new_internal_node()
    except IndexError as e:
        raise CorruptHeaderError("Header tree has too many internal nodes") from e
    tree.nodes[node].child_0 = _input_node(input_bit_file, tree, symbols)
    tree.nodes[node].child_1 = _input_node(input_bit_file, tree, symbols)
    return node


def compress_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', args=()):
    counts = count_bytes(input_bit_file)
    tree = build_tree(counts)
    codes = convert_tree_to_code(tree)

    for arg in args:
        if arg == "-d":
            print_model(tree, codes)
        else:
            print(f"Unknown argument: {arg}")

    output_bit_file.output_bits(HUFF_TREE, BITS_PER_INT)
    output_tree(output_bit_file, tree)
    compress_data(input_bit_file, output_bit_file, codes)
    output_bit_file.close_bit_file()


def expand_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', args=()):
    try:
        try:
            magic = input_bit_file.input_bits(BITS_PER_INT)
        except EOFError as e:
            raise BadMagicError("Input is too short to hold a magic number") from e
        if magic != HUFF_TREE:
            raise BadMagicError(f"Invalid magic number 0x{magic:08x}")

        tree = input_tree(input_bit_file)

        for arg in args:
            if arg == "-d":
                print_model(tree, None)
            else:
                print(f"Unknown argument: {arg}")

        expand_data(input_bit_file, output_bit_file, tree)
    finally:
        output_bit_file.close_bit_file()


def compress_data(input_bit_file, output_bit_file, codes):
    input_bit_file.rewind_bit_file()

    while True:
        try:
            c = input_bit_file.input_bits(BITS_PER_WORD)
        except EOFError:
            break
        code = codes[c]
        if code is None:
            raise HuffError(f"Byte {c} was not seen while counting; input changed between passes")
        output_bit_file.output_bits(code.code, code.code_bits)

    end = codes[END_OF_STREAM]
    output_bit_file.output_bits(end.code, end.code_bits)


def expand_data(input_bit_file, output_bit_file, tree):
    nodes = tree.nodes
    while True:
        node = tree.root

        try:
            while node > END_OF_STREAM:
                if input_bit_file.input_bit():
                    node = nodes[node].child_1
                else:
                    node = nodes[node].child_0
        except EOFError as e:
            raise TruncatedStreamError("Compressed data ended before the END_OF_STREAM code") from e

        if node == END_OF_STREAM:
            break

        output_bit_file.output_bits(node, BITS_PER_WORD)


def compress_bytes(data: bytes) -> bytes:
    output = BytesIO()
    compress_file(CompressorBitio.BitFile(BytesIO(data), True),
                  CompressorBitio.BitFile(output, False))
    return output.getvalue()


def expand_bytes(blob: bytes) -> bytes:
    output = BytesIO()
    expand_file(CompressorBitio.BitFile(BytesIO(blob), True),
                CompressorBitio.BitFile(output, False))
    return output.getvalue()


def print_char(c):
    if 0x20 <= c < 127:
        print(f"'{chr(c)}'", end="")
    else:
        print(f"{c:3d}", end="")


def print_model(tree, codes):
    # trees read back from a header carry no weights
    has_weights = tree.nodes[tree.root].weight != 0
    for node in tree.walk():
        print("node=", end="")
        print_char(node)
        if has_weights:
            print(f"  count={tree.nodes[node].weight:3d}", end="")

        if tree.is_leaf(node):
            if codes is not None:
                print(f"  Huffman code={codes[node]}", end="")
        else:
            print("  child_0=", end="")
            print_char(tree.nodes[node].child_0)
            print("  child_1=", end="")
            print_char(tree.nodes[node].child_1)

        print()
