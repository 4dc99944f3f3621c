"""
Реализует построение дерева Хаффмана и таблицы кодов.
Использует переменную длину кодов: частые байты кодируются короче.
"""

import heapq
import itertools
import logging
from typing import Dict, Iterator, List, Optional, Tuple
from collections import Counter

from errors import EmptyInputError


logger = logging.getLogger(__name__)


class HuffmanNode:
    def __init__(self, symbol: Optional[int] = None, weight: int = 0,
                 left: Optional['HuffmanNode'] = None,
                 right: Optional['HuffmanNode'] = None):
        self.symbol = symbol
        self.weight = weight
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        # У внутреннего узла всегда есть левый потомок
        return self.left is None

    def __repr__(self):
        if self.is_leaf():
            return f"Leaf({self.symbol:02x}, weight={self.weight})"
        return f"Node(weight={self.weight})"


def count_symbols(data: bytes) -> Counter:
    return Counter(data)


def build_tree(frequencies: Dict[int, int]) -> HuffmanNode:
    """
    Строит дерево Хаффмана жадным слиянием двух самых лёгких узлов.

    При равных весах первым извлекается узел, добавленный в кучу раньше:
    листья добавляются по возрастанию значения байта, новые внутренние
    узлы получают следующий порядковый номер. Первый извлечённый узел
    становится левым потомком, второй правым.
    """
    if not frequencies:
        raise EmptyInputError("Cannot build a Huffman tree without symbols")

    order = itertools.count()
    heap: List[Tuple[int, int, HuffmanNode]] = []

    for symbol in sorted(frequencies):
        node = HuffmanNode(symbol=symbol, weight=frequencies[symbol])
        heap.append((node.weight, next(order), node))
    heapq.heapify(heap)

    while len(heap) > 1:
        _, _, left = heapq.heappop(heap)
        _, _, right = heapq.heappop(heap)

        parent = HuffmanNode(weight=left.weight + right.weight,
                             left=left, right=right)
        heapq.heappush(heap, (parent.weight, next(order), parent))

    root = heap[0][2]
    logger.debug("Built Huffman tree: %d leaves, root weight %d",
                 len(frequencies), root.weight)
    return root


def build_codes(root: HuffmanNode) -> Dict[int, str]:
    codes: Dict[int, str] = {}

    # Единственный лист получает код из одного бита, иначе упаковщику
    # нечего было бы писать
    if root.is_leaf():
        codes[root.symbol] = '0'
        return codes

    def traverse(node: HuffmanNode, code: str):
        if node.is_leaf():
            codes[node.symbol] = code
            return

        traverse(node.left, code + '0')
        traverse(node.right, code + '1')

    traverse(root, '')
    return codes


def iter_leaves(root: HuffmanNode) -> Iterator[HuffmanNode]:
    if root.is_leaf():
        yield root
        return

    yield from iter_leaves(root.left)
    yield from iter_leaves(root.right)


def code_lengths(codes: Dict[int, str]) -> Dict[int, int]:
    return {symbol: len(code) for symbol, code in codes.items()}


class HuffmanTree:
    def __init__(self):
        self.root: Optional[HuffmanNode] = None
        self.codes: Dict[int, str] = {}
        self.frequencies: Dict[int, int] = {}

    def build(self, frequencies: Dict[int, int]):
        self.frequencies = dict(frequencies)
        self.root = build_tree(self.frequencies)
        self.codes = build_codes(self.root)

    @staticmethod
    def from_data(data: bytes) -> 'HuffmanTree':
        tree = HuffmanTree()
        tree.build(count_symbols(data))
        return tree

    def encoded_bit_length(self) -> int:
        return sum(self.frequencies[symbol] * len(code)
                   for symbol, code in self.codes.items())

    def average_code_length(self) -> float:
        total = sum(self.frequencies.values())
        if total == 0:
            return 0.0
        return self.encoded_bit_length() / total
