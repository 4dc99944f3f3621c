"""
Командная строка для кодека Хаффмана.
"""

import argparse
import logging
import sys
from archiver import Archiver
from errors import HuffmanError


def main():
    parser = argparse.ArgumentParser(
        description='Huffman file encoder/decoder',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py encode file.txt            # writes file.txt.enc
  python main.py encode file.txt --stats
  python main.py decode file.txt.enc        # writes file.txt
  python main.py decode file.txt.enc -o copy.txt
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    encode_parser = subparsers.add_parser('encode', help='Compress a file')
    encode_parser.add_argument('file', help='File to compress')
    encode_parser.add_argument('-o', '--output', help='Output path (default: FILE.enc)')
    encode_parser.add_argument('--stats', action='store_true', help='Print compression statistics')

    decode_parser = subparsers.add_parser('decode', help='Decompress a .enc file')
    decode_parser.add_argument('file', help='File to decompress')
    decode_parser.add_argument('-o', '--output', help='Output path (default: FILE without .enc)')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    if not args.command:
        parser.print_help()
        return

    archiver = Archiver(show_stats=getattr(args, 'stats', False))

    try:
        if args.command == 'encode':
            archiver.encode_file(args.file, args.output)

        elif args.command == 'decode':
            archiver.decode_file(args.file, args.output)

    except (HuffmanError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
