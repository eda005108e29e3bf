"""Command-line tool that encrypts or decrypts a file with Salsa20."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence

from gt7shaker.salsa20 import BLOCK_SIZE, IV_SIZE, KEY_SIZE, Salsa20

BLOCKS_PER_CHUNK = 8192
CHUNK_SIZE = BLOCKS_PER_CHUNK * BLOCK_SIZE
FULL_KEY_SIZE = KEY_SIZE + IV_SIZE

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_HELP = """\
Usage: salsa20 -p INPUT OUTPUT KEY
       salsa20 -h

Salsa20 is a stream cypher.

Options:
  -h Shows this help text.
  -p Encrypts or decrypts file INPUT with KEY and outputs result to file OUTPUT.
     KEY is a 32-byte key concatenated with 8-byte IV written in HEX."""


class _UsageError(Exception):
    """Raised when the command line cannot be used."""


def parse_key(text: str) -> bytes:
    """Decode a hex string holding a 32-byte key followed by an 8-byte IV."""
    if len(text) != 2 * FULL_KEY_SIZE:
        raise ValueError(f"key must be {2 * FULL_KEY_SIZE} hex digits, got {len(text)}")
    if not set(text) <= _HEX_DIGITS:
        raise ValueError("key contains characters that are not hex digits")
    return bytes.fromhex(text)


def process_file(
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    key: bytes,
    progress: Callable[[float], None] | None = None,
) -> int:
    """Run the input file through Salsa20 into the output file.

    ``key`` holds the 32-byte key followed by the 8-byte IV. ``progress`` is
    called with a percentage after each chunk. Returns the bytes processed.
    """
    key = bytes(key)
    if len(key) != FULL_KEY_SIZE:
        raise ValueError(f"key must be {FULL_KEY_SIZE} bytes, got {len(key)}")

    try:
        source = open(input_path, "rb")
    except OSError as exc:
        raise OSError("Could not open input file.") from exc

    with source:
        try:
            target = open(output_path, "wb")
        except OSError as exc:
            raise OSError("Could not create output file.") from exc

        with target:
            file_size = os.fstat(source.fileno()).st_size
            num_chunks, remainder = divmod(file_size, CHUNK_SIZE)

            cipher = Salsa20(key[:KEY_SIZE])
            cipher.set_iv(key[KEY_SIZE:])

            for done in range(1, num_chunks + 1):
                target.write(cipher.process_blocks(source.read(CHUNK_SIZE)))
                if progress is not None:
                    progress(100.0 * done / num_chunks)

            if remainder:
                target.write(cipher.process_bytes(source.read(remainder)))
                if progress is not None:
                    progress(100.0)

    return file_size


def _parse_arguments(argv: Sequence[str]) -> tuple[str, str, bytes] | None:
    """Return (input, output, key), or ``None`` when help was asked for."""
    input_name = output_name = key_text = ""
    args = list(argv)
    for position, parameter in enumerate(args):
        if parameter == "-p":
            rest = args[position + 1:]
            if len(rest) == 3:
                input_name, output_name, key_text = rest
            break
        if parameter == "-h":
            return None

    if not input_name:
        raise _UsageError("Input file name was not specified.")
    if not output_name:
        raise _UsageError("Output file name was not specified.")
    if input_name == output_name:
        raise _UsageError("Input and output files should be distinct.")
    if not key_text:
        raise _UsageError("Key was not specified.")
    try:
        key = parse_key(key_text)
    except ValueError as exc:
        raise _UsageError("Invalid key value.") from exc
    return input_name, output_name, key


def _print_progress(percentage: float) -> None:
    print(f"[{percentage:3.2f}]", end="\r", flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; returns 0 on success, 1 on bad usage, 2 on I/O failure."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        parsed = _parse_arguments(argv)
    except _UsageError as exc:
        print(f"E: {exc}")
        return 1

    if parsed is None:
        print(_HELP)
        return 0

    input_name, output_name, key = parsed
    try:
        print(f'Processing file "{input_name}"')
        process_file(input_name, output_name, key, _print_progress)
    except OSError as exc:
        print(f"E: {exc}")
        return 2

    print()
    print("OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())