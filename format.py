"""
Определяет формат заголовка с деревом Хаффмана и методы его чтения/записи.

Дерево записывается обходом в обратном порядке (потомки раньше родителя)
записями по два байта:
    0x01 <символ>   лист
    0x00 0x00       внутренний узел
    0x00 0x01       конец дерева, за ним начинаются коды
"""

import io
import logging
import struct
from typing import List, Tuple

from errors import MalformedTreeError
from huffman import HuffmanNode


logger = logging.getLogger(__name__)

INTERNAL_MARKER = 0x00
LEAF_MARKER = 0x01
RESERVED_BYTE = 0x00
END_BYTE = 0x01
END_MARKER = bytes([INTERNAL_MARKER, END_BYTE])
RECORD_SIZE = 2


class TreeCodec:
    @staticmethod
    def write_tree(root: HuffmanNode) -> bytes:
        output = io.BytesIO()
        TreeCodec._write_node(output, root)
        output.write(END_MARKER)
        return output.getvalue()

    @staticmethod
    def _write_node(output: io.BytesIO, node: HuffmanNode):
        if node.is_leaf():
            output.write(struct.pack('BB', LEAF_MARKER, node.symbol))
            return

        TreeCodec._write_node(output, node.left)
        TreeCodec._write_node(output, node.right)
        output.write(struct.pack('BB', INTERNAL_MARKER, RESERVED_BYTE))

    @staticmethod
    def read_tree(data: bytes, offset: int = 0) -> Tuple[HuffmanNode, int]:
        """
        Восстанавливает дерево, начиная с ``offset``.

        Возвращает корень и смещение первого байта после маркера конца.
        """
        pos = offset
        stack: List[HuffmanNode] = []

        while True:
            if pos + RECORD_SIZE > len(data):
                raise MalformedTreeError(
                    f"Tree end marker not found (stopped at offset {pos})")

            marker, value = struct.unpack_from('BB', data, pos)
            pos += RECORD_SIZE

            if marker == LEAF_MARKER:
                stack.append(HuffmanNode(symbol=value))

            elif marker == INTERNAL_MARKER and value == END_BYTE:
                break

            elif marker == INTERNAL_MARKER:
                if len(stack) < 2:
                    raise MalformedTreeError(
                        f"Internal node at offset {pos - RECORD_SIZE} "
                        f"has {len(stack)} of 2 children")
                right = stack.pop()
                left = stack.pop()
                stack.append(HuffmanNode(left=left, right=right))

            else:
                raise MalformedTreeError(
                    f"Unknown node marker 0x{marker:02x} "
                    f"at offset {pos - RECORD_SIZE}")

        if len(stack) != 1:
            raise MalformedTreeError(
                f"Tree ended with {len(stack)} roots instead of 1")

        logger.debug("Read tree header: %d bytes", pos - offset)
        return stack[0], pos


def write_tree(root: HuffmanNode) -> bytes:
    return TreeCodec.write_tree(root)


def read_tree(data: bytes, offset: int = 0) -> Tuple[HuffmanNode, int]:
    return TreeCodec.read_tree(data, offset)
