import unittest
import tempfile
import os
import sys
import random
from unittest import mock

from errors import EmptyInputError, HuffmanError, MalformedTreeError, TruncatedPayloadError
from huffman import HuffmanNode, HuffmanTree, build_codes, build_tree, code_lengths, count_symbols, iter_leaves
from format import END_MARKER, TreeCodec, read_tree, write_tree
from bitstream import BitPacker, BitUnpacker, pack_payload
from compressor import CompressionStats, compress_data, decompress_data
from archiver import Archiver
import main


class TestSymbolCounter(unittest.TestCase):
    def test_counts(self):
        frequencies = count_symbols(b"aaaab")
        self.assertEqual(frequencies, {ord('a'): 4, ord('b'): 1})

    def test_empty_data(self):
        self.assertEqual(len(count_symbols(b"")), 0)


class TestTreeBuilder(unittest.TestCase):
    def _check_weights(self, node):
        if node.is_leaf():
            return node.weight
        self.assertIsNotNone(node.right)
        total = self._check_weights(node.left) + self._check_weights(node.right)
        self.assertEqual(node.weight, total)
        return total

    def test_empty_frequencies(self):
        with self.assertRaises(EmptyInputError):
            build_tree({})

    def test_empty_input_is_value_error(self):
        with self.assertRaises(ValueError):
            build_tree(count_symbols(b""))

    def test_single_symbol_is_single_leaf(self):
        root = build_tree({0x41: 1000})
        self.assertTrue(root.is_leaf())
        self.assertEqual(root.symbol, 0x41)
        self.assertEqual(root.weight, 1000)

    def test_two_symbols(self):
        root = build_tree(count_symbols(b"aaaab"))
        self.assertEqual(root.weight, 5)
        self.assertEqual(root.left.symbol, ord('b'))
        self.assertEqual(root.right.symbol, ord('a'))
        self.assertEqual(root.left.weight, 1)
        self.assertEqual(root.right.weight, 4)

    def test_weight_conservation(self):
        random.seed(7)
        data = bytes(random.choice(b"abcdefghij ") for _ in range(2000))
        root = build_tree(count_symbols(data))
        self.assertEqual(self._check_weights(root), len(data))
        self.assertEqual(root.weight, len(data))

    def test_ties_break_by_insertion_order(self):
        root = build_tree({ord('c'): 1, ord('a'): 1, ord('b'): 1})
        self.assertEqual([leaf.symbol for leaf in iter_leaves(root)],
                         [ord('c'), ord('a'), ord('b')])

    def test_deterministic(self):
        data = b"mississippi river"
        self.assertEqual(compress_data(data), compress_data(data))


class TestCodeTable(unittest.TestCase):
    def test_every_symbol_has_code(self):
        data = b"The quick brown fox jumps over the lazy dog"
        tree = HuffmanTree.from_data(data)
        self.assertEqual(set(tree.codes), set(data))

    def test_prefix_free(self):
        random.seed(42)
        data = bytes(random.randint(0, 63) for _ in range(5000))
        codes = build_codes(build_tree(count_symbols(data)))

        for a, code_a in codes.items():
            for b, code_b in codes.items():
                if a != b:
                    self.assertFalse(code_b.startswith(code_a))

    def test_frequent_symbols_get_shorter_codes(self):
        tree = HuffmanTree.from_data(b"a" * 100 + b"b" * 10 + b"c" + b"d")
        lengths = code_lengths(tree.codes)
        self.assertLessEqual(lengths[ord('a')], lengths[ord('b')])
        self.assertLessEqual(lengths[ord('b')], lengths[ord('c')])

    def test_single_leaf_gets_one_bit(self):
        codes = build_codes(HuffmanNode(symbol=0x41, weight=3))
        self.assertEqual(codes, {0x41: '0'})

    def test_average_code_length(self):
        tree = HuffmanTree.from_data(b"aaaab")
        self.assertEqual(tree.encoded_bit_length(), 5)
        self.assertEqual(tree.average_code_length(), 1.0)


class TestTreeCodec(unittest.TestCase):
    def test_write_two_leaves(self):
        root = build_tree(count_symbols(b"aaaab"))
        self.assertEqual(write_tree(root),
                         bytes([0x01, ord('b'), 0x01, ord('a'), 0x00, 0x00, 0x00, 0x01]))

    def test_write_single_leaf(self):
        self.assertEqual(write_tree(HuffmanNode(symbol=0x41)), bytes([0x01, 0x41]) + END_MARKER)

    def test_read_restores_shape(self):
        data = b"abracadabra, alakazam"
        root = build_tree(count_symbols(data))
        header = TreeCodec.write_tree(root)

        restored, offset = TreeCodec.read_tree(header + b"payload")
        self.assertEqual(offset, len(header))
        self.assertEqual(build_codes(restored), build_codes(root))

    def test_read_from_offset(self):
        header = write_tree(build_tree(count_symbols(b"xyz")))
        restored, offset = read_tree(b"\xff\xff" + header, 2)
        self.assertEqual(offset, 2 + len(header))
        self.assertEqual(sorted(leaf.symbol for leaf in iter_leaves(restored)), list(b"xyz"))

    def test_leaf_symbol_equal_to_marker(self):
        root = build_tree({0x00: 3, 0x01: 1})
        restored, _ = read_tree(write_tree(root))
        self.assertEqual(build_codes(restored), build_codes(root))

    def test_missing_end_marker(self):
        header = write_tree(build_tree(count_symbols(b"aaaab")))
        with self.assertRaises(MalformedTreeError):
            read_tree(header[:-2])

    def test_odd_trailing_byte(self):
        header = write_tree(build_tree(count_symbols(b"aaaab")))
        with self.assertRaises(MalformedTreeError):
            read_tree(header[:-1])

    def test_empty_tree(self):
        with self.assertRaises(MalformedTreeError):
            read_tree(END_MARKER)

    def test_internal_without_children(self):
        with self.assertRaises(MalformedTreeError):
            read_tree(bytes([0x01, 0x41, 0x00, 0x00]) + END_MARKER)

    def test_too_many_roots(self):
        with self.assertRaises(MalformedTreeError):
            read_tree(bytes([0x01, 0x41, 0x01, 0x42]) + END_MARKER)

    def test_unknown_marker(self):
        with self.assertRaises(MalformedTreeError):
            read_tree(bytes([0x07, 0x41]) + END_MARKER)


class TestBitPacker(unittest.TestCase):
    def test_partial_byte(self):
        packer = BitPacker()
        packer.write_code('101')
        self.assertEqual(packer.finish(), bytes([3, 0b10100000]))

    def test_full_byte_moves_to_trailer(self):
        packer = BitPacker()
        packer.write_code('1111')
        packer.write_code('0000')
        self.assertEqual(packer.finish(), bytes([8, 0b11110000]))

    def test_long_code_emits_several_bytes(self):
        packer = BitPacker()
        packer.write_code('1' * 20)
        self.assertEqual(packer.finish(), bytes([0xff, 0xff, 4, 0xf0]))

    def test_empty_packer(self):
        self.assertEqual(BitPacker().finish(), b'')

    def test_write_after_finish(self):
        packer = BitPacker()
        packer.write_code('1')
        packer.finish()
        with self.assertRaises(RuntimeError):
            packer.write_code('1')

    def test_empty_code(self):
        with self.assertRaises(ValueError):
            BitPacker().write_code('')

    def test_pack_payload(self):
        codes = {ord('a'): '1', ord('b'): '0'}
        self.assertEqual(pack_payload(b"aaaab", codes), bytes([5, 0b11110000]))


class TestBitUnpacker(unittest.TestCase):
    def setUp(self):
        self.root = build_tree(count_symbols(b"abc"))

    def test_unpack(self):
        payload = pack_payload(b"abcabc", build_codes(self.root))
        self.assertEqual(BitUnpacker(self.root).unpack(payload), b"abcabc")

    def test_single_leaf_root(self):
        root = HuffmanNode(symbol=0x41)
        self.assertEqual(BitUnpacker(root).unpack(bytes([0x00, 3, 0x00])), b"A" * 11)

    def test_too_short(self):
        with self.assertRaises(TruncatedPayloadError):
            BitUnpacker(self.root).unpack(b"\x05")

    def test_offset_past_end(self):
        with self.assertRaises(TruncatedPayloadError):
            BitUnpacker(self.root).unpack(b"\x05\x00", 5)

    def test_zero_valid_bits(self):
        with self.assertRaises(TruncatedPayloadError):
            BitUnpacker(self.root).unpack(bytes([0, 0x80]))

    def test_too_many_valid_bits(self):
        with self.assertRaises(TruncatedPayloadError):
            BitUnpacker(self.root).unpack(bytes([9, 0x80]))

    def test_ends_inside_code(self):
        # c='0', a='10', b='11'; три бита '101' обрываются посреди кода
        with self.assertRaises(TruncatedPayloadError):
            BitUnpacker(self.root).unpack(bytes([3, 0b10100000]))


class TestHuffmanEncoding(unittest.TestCase):
    def test_scenario_aaaab(self):
        compressed = compress_data(b"aaaab")
        self.assertEqual(compressed, bytes([
            0x01, ord('b'), 0x01, ord('a'), 0x00, 0x00,
            0x00, 0x01,
            5, 0b11110000,
        ]))
        self.assertEqual(decompress_data(compressed), b"aaaab")

    def test_simple_huffman(self):
        data = b"aaabbc"
        self.assertEqual(decompress_data(compress_data(data)), data)

    def test_empty_huffman(self):
        with self.assertRaises(EmptyInputError):
            compress_data(b"")

    def test_single_char(self):
        data = b"A" * 1000
        compressed = compress_data(data)
        self.assertEqual(compressed[:4], bytes([0x01, 0x41]) + END_MARKER)
        self.assertEqual(len(compressed), 4 + 125 + 1)
        self.assertEqual(decompress_data(compressed), data)

    def test_single_byte(self):
        for data in (b"A", b"\x00", b"\x01", b"\xff"):
            self.assertEqual(decompress_data(compress_data(data)), data)

    def test_small_inputs(self):
        random.seed(3)
        for n in range(1, 40):
            data = bytes(random.getrandbits(8) for _ in range(n))
            self.assertEqual(decompress_data(compress_data(data)), data)

    def test_all_bytes_once(self):
        data = bytes(range(256))
        self.assertEqual(decompress_data(compress_data(data)), data)

    def test_random_data(self):
        random.seed(42)
        data = bytes(random.randint(0, 255) for _ in range(10 * 1024))
        self.assertEqual(decompress_data(compress_data(data)), data)

    def test_skewed_distribution(self):
        # Коды длиннее байта
        data = b"".join(bytes([i]) * (2 ** i) for i in range(14))
        tree = HuffmanTree.from_data(data)
        self.assertGreater(max(code_lengths(tree.codes).values()), 8)
        self.assertEqual(decompress_data(compress_data(data)), data)

    def test_text_compresses(self):
        data = b"Lorem ipsum dolor sit amet " * 200
        compressed = compress_data(data)
        self.assertLess(len(compressed), len(data))
        self.assertEqual(decompress_data(compressed), data)

    def test_errors_share_base(self):
        for error in (EmptyInputError, MalformedTreeError, TruncatedPayloadError):
            self.assertTrue(issubclass(error, HuffmanError))

    def test_truncated_stream(self):
        compressed = compress_data(b"aaaab")
        with self.assertRaises(TruncatedPayloadError):
            decompress_data(compressed[:-2])

    def test_corrupted_trailer(self):
        compressed = bytearray(compress_data(b"This is a test" * 100))
        compressed[-2] = 0
        with self.assertRaises(TruncatedPayloadError):
            decompress_data(bytes(compressed))

    def test_missing_tree(self):
        with self.assertRaises(MalformedTreeError):
            decompress_data(b"")

    def test_stats(self):
        data = b"aaaab"
        stats = CompressionStats(data, compress_data(data))
        self.assertEqual(stats.original_size, 5)
        self.assertEqual(stats.compressed_size, 10)
        self.assertEqual(stats.tree_size, 8)
        self.assertEqual(stats.payload_size, 2)
        self.assertEqual(stats.distinct_symbols, 2)
        self.assertAlmostEqual(stats.average_code_length, 1.0)
        self.assertAlmostEqual(stats.compression_ratio, 200.0)


class TestArchiver(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.archiver = Archiver()

    def tearDown(self):
        import shutil
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _write(self, name, data):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def test_encode_decode_file(self):
        data = b"Hello World! " * 100
        test_file = self._write("test.txt", data)

        encoded = self.archiver.encode_file(test_file)
        self.assertEqual(encoded, test_file + ".enc")
        self.assertLess(os.path.getsize(encoded), len(data))

        os.remove(test_file)
        decoded = self.archiver.decode_file(encoded)
        self.assertEqual(decoded, test_file)

        with open(decoded, 'rb') as f:
            self.assertEqual(f.read(), data)

    def test_explicit_output(self):
        test_file = self._write("data.bin", bytes(range(256)) * 4)
        encoded = self.archiver.encode_file(test_file, os.path.join(self.temp_dir, "packed.enc"))
        decoded = self.archiver.decode_file(encoded, os.path.join(self.temp_dir, "copy.bin"))

        with open(decoded, 'rb') as f:
            self.assertEqual(f.read(), bytes(range(256)) * 4)

    def test_decode_requires_suffix(self):
        test_file = self._write("plain.txt", b"abc")
        with self.assertRaises(ValueError):
            self.archiver.decode_file(test_file)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            self.archiver.encode_file(os.path.join(self.temp_dir, "nope.txt"))

    def test_encode_empty_file(self):
        test_file = self._write("empty.txt", b"")
        with self.assertRaises(EmptyInputError):
            self.archiver.encode_file(test_file)

    def test_stats_output(self):
        test_file = self._write("stats.txt", b"aaaab")
        Archiver(show_stats=True).encode_file(test_file)
        self.assertTrue(os.path.isfile(test_file + ".enc"))


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        import shutil
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _run(self, *args):
        with mock.patch.object(sys, 'argv', ['main.py', *args]):
            main.main()

    def test_encode_and_decode(self):
        test_file = os.path.join(self.temp_dir, "cli.txt")
        output = os.path.join(self.temp_dir, "cli_copy.txt")
        with open(test_file, 'wb') as f:
            f.write(b"command line " * 20)

        self._run('encode', test_file, '--stats')
        self._run('decode', test_file + '.enc', '-o', output)

        with open(output, 'rb') as f:
            self.assertEqual(f.read(), b"command line " * 20)

    def test_corrupt_file_exits(self):
        bad_file = os.path.join(self.temp_dir, "bad.enc")
        with open(bad_file, 'wb') as f:
            f.write(b"\x07\x07\x07\x07")

        with self.assertRaises(SystemExit) as ctx:
            self._run('decode', bad_file)
        self.assertEqual(ctx.exception.code, 1)

    def test_no_command(self):
        self._run()


def run_tests():
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestSymbolCounter))
    suite.addTests(loader.loadTestsFromTestCase(TestTreeBuilder))
    suite.addTests(loader.loadTestsFromTestCase(TestCodeTable))
    suite.addTests(loader.loadTestsFromTestCase(TestTreeCodec))
    suite.addTests(loader.loadTestsFromTestCase(TestBitPacker))
    suite.addTests(loader.loadTestsFromTestCase(TestBitUnpacker))
    suite.addTests(loader.loadTestsFromTestCase(TestHuffmanEncoding))
    suite.addTests(loader.loadTestsFromTestCase(TestArchiver))
    suite.addTests(loader.loadTestsFromTestCase(TestCommandLine))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
