"""
Huffman Compression Module

Точки входа сжатия и распаковки: частоты -> дерево -> коды -> заголовок
с деревом + упакованный поток кодов.
"""

import logging

from bitstream import pack_payload, unpack_payload
from format import read_tree, write_tree
from huffman import HuffmanTree


logger = logging.getLogger(__name__)


def compress_data(data: bytes) -> bytes:
    tree = HuffmanTree.from_data(data)

    header = write_tree(tree.root)
    payload = pack_payload(data, tree.codes)

    logger.debug("Compressed %d bytes: tree %d bytes, payload %d bytes",
                 len(data), len(header), len(payload))
    return header + payload


def decompress_data(compressed: bytes) -> bytes:
    root, offset = read_tree(compressed)
    return unpack_payload(root, compressed, offset)


class CompressionStats:
    def __init__(self, data: bytes, compressed: bytes):
        self.original_size = len(data)
        self.compressed_size = len(compressed)

        tree = HuffmanTree.from_data(data)
        self.distinct_symbols = len(tree.codes)
        self.tree_size = len(write_tree(tree.root))
        self.payload_size = self.compressed_size - self.tree_size
        self.average_code_length = tree.average_code_length()

        self.compression_ratio = (
            self.compressed_size / self.original_size * 100
            if self.original_size > 0 else 0
        )

    def print_stats(self):
        print(f"Huffman Compression Statistics:")
        print(f"  Original size:       {self.original_size} bytes")
        print(f"  Distinct symbols:    {self.distinct_symbols}")
        print(f"  Avg code length:     {self.average_code_length:.2f} bits")
        print(f"  Tree header:         {self.tree_size} bytes")
        print(f"  Payload:             {self.payload_size} bytes")
        print(f"  Compressed size:     {self.compressed_size} bytes")
        print(f"  Compression ratio:   {self.compression_ratio:.1f}%")
