"""
Сжатие и распаковка файлов: FILE -> FILE.enc и обратно.
"""

import logging
from pathlib import Path
from typing import Optional

from compressor import CompressionStats, compress_data, decompress_data


logger = logging.getLogger(__name__)

ENCODED_SUFFIX = '.enc'


class Archiver:
    def __init__(self, show_stats: bool = False):
        self.show_stats = show_stats

    def encode_file(self, file_path: str, output_path: Optional[str] = None) -> str:
        with open(file_path, 'rb') as f:
            data = f.read()

        if output_path is None:
            output_path = file_path + ENCODED_SUFFIX

        print(f"Encoding {file_path}...", end=" ")
        compressed = compress_data(data)

        with open(output_path, 'wb') as f:
            f.write(compressed)

        ratio = len(compressed) / len(data) * 100
        print(f"OK ({ratio:.1f}%)")

        if self.show_stats:
            CompressionStats(data, compressed).print_stats()

        logger.debug("Wrote %s (%d bytes)", output_path, len(compressed))
        return output_path

    def decode_file(self, file_path: str, output_path: Optional[str] = None) -> str:
        if not file_path.endswith(ENCODED_SUFFIX):
            raise ValueError("Input file was not encoded by this program "
                             f"(expected a {ENCODED_SUFFIX} file)")

        with open(file_path, 'rb') as f:
            compressed = f.read()

        if output_path is None:
            output_path = file_path[:-len(ENCODED_SUFFIX)]

        print(f"Decoding {file_path}...", end=" ")
        data = decompress_data(compressed)

        with open(output_path, 'wb') as f:
            f.write(data)

        print(f"OK -> {Path(output_path).name}")

        logger.debug("Wrote %s (%d bytes)", output_path, len(data))
        return output_path
