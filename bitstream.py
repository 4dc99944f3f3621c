"""
Упаковка кодов Хаффмана в плотный поток битов и обратная распаковка.

Поток всегда заканчивается двумя байтами: число значащих битов (1-8)
в последнем байте и сам последний байт, дополненный нулями справа.
"""

import logging
from typing import Dict

from errors import TruncatedPayloadError
from huffman import HuffmanNode


logger = logging.getLogger(__name__)

BYTE_LENGTH = 8
TRAILER_SIZE = 2


class BitPacker:
    def __init__(self):
        self.output = bytearray()
        self.pending = ''
        self.finished = False

    def write_code(self, code: str):
        if self.finished:
            raise RuntimeError("BitPacker is already finished")
        if not code:
            raise ValueError("Huffman code must contain at least one bit")

        self.pending += code

        while len(self.pending) >= BYTE_LENGTH:
            self.output.append(int(self.pending[:BYTE_LENGTH], 2))
            self.pending = self.pending[BYTE_LENGTH:]

    def finish(self) -> bytes:
        if self.finished:
            raise RuntimeError("BitPacker is already finished")
        self.finished = True

        if self.pending:
            valid_bits = len(self.pending)
            last_byte = int(self.pending.ljust(BYTE_LENGTH, '0'), 2)
            self.pending = ''
        elif self.output:
            # Последний полный байт уходит в хвост с отметкой 8 битов
            valid_bits = BYTE_LENGTH
            last_byte = self.output.pop()
        else:
            return b''

        self.output.append(valid_bits)
        self.output.append(last_byte)
        return bytes(self.output)


class BitUnpacker:
    def __init__(self, root: HuffmanNode):
        self.root = root

    def unpack(self, data: bytes, offset: int = 0) -> bytes:
        payload_size = len(data) - offset
        if payload_size < TRAILER_SIZE:
            raise TruncatedPayloadError(
                f"Payload has {max(payload_size, 0)} bytes, "
                f"at least {TRAILER_SIZE} required")

        valid_bits = data[-2]
        if not 1 <= valid_bits <= BYTE_LENGTH:
            raise TruncatedPayloadError(
                f"Invalid valid-bit count {valid_bits} in payload trailer")

        output = bytearray()
        node = self.root

        for pos in range(offset, len(data)):
            if pos == len(data) - 2:
                continue

            byte = data[pos]
            bit_count = valid_bits if pos == len(data) - 1 else BYTE_LENGTH

            for n in range(bit_count):
                node = self._step(node, byte & (0x80 >> n), pos)

                if node.is_leaf():
                    output.append(node.symbol)
                    node = self.root

        if node is not self.root:
            raise TruncatedPayloadError("Payload ends in the middle of a code")

        logger.debug("Unpacked %d bytes from %d payload bytes",
                     len(output), payload_size)
        return bytes(output)

    def _step(self, node: HuffmanNode, bit: int, pos: int) -> HuffmanNode:
        # Дерево из одного листа: каждый бит означает этот символ
        if node.is_leaf():
            return node

        child = node.right if bit else node.left
        if child is None:
            raise TruncatedPayloadError(
                f"Code walks past a leaf at payload offset {pos}")
        return child


def pack_payload(data: bytes, codes: Dict[int, str]) -> bytes:
    packer = BitPacker()
    for byte in data:
        packer.write_code(codes[byte])
    return packer.finish()


def unpack_payload(root: HuffmanNode, data: bytes, offset: int = 0) -> bytes:
    return BitUnpacker(root).unpack(data, offset)
