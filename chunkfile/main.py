"""
main.py — Chunkfile Command-Line Entrypoint
=============================================
Drives the chunked reader from the command line:

    chunkfile dump --fname FILE [--csiz N] [-x]
    chunkfile manifest --file FILE [--chunk-size N] [--output OUT]
    chunkfile verify --file FILE --manifest OUT [--index I]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from chunkfile.config import settings
from chunkfile.core.dump import render_chunk
from chunkfile.core.errors import ChunkedFileError
from chunkfile.core.manifest import build_manifest, verify_chunk, verify_file
from chunkfile.core.reader import Chunk, ChunkedFileReader
from chunkfile.schemas import FileManifest

logger = logging.getLogger("chunkfile")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def dump(path: str, chunk_size: int, as_hex: bool, offset: int = 0) -> int:
    """Print every chunk of ``path`` with its position banner."""
    with ChunkedFileReader(path, chunk_size, offset) as reader:
        print(f"filesize {reader.file_size}")

        def show(chunk: Chunk) -> None:
            print(render_chunk(reader, chunk, as_hex, settings.HEX_WIDTH))

        count = reader.for_each(show)
    logger.debug("Dumped %d chunks of %s", count, path)
    return EXIT_OK


def manifest(path: str, chunk_size: int, output: Optional[str]) -> int:
    """Build a manifest for ``path`` and write it to ``output`` or stdout."""
    result = build_manifest(path, chunk_size)
    text = result.model_dump_json(indent=2)
    if output:
        Path(output).write_text(text + "\n")
        logger.info("Manifest written to %s", output)
    else:
        print(text)
    return EXIT_OK


def verify(path: str, manifest_path: str, index: Optional[int]) -> int:
    """Check ``path`` (or one chunk of it) against a saved manifest."""
    saved = FileManifest.model_validate_json(Path(manifest_path).read_text())
    if index is not None:
        result = verify_chunk(path, saved, index)
        print(result.model_dump_json(indent=2))
        return EXIT_OK if result.is_valid else EXIT_INVALID

    report = verify_file(path, saved)
    print(report.model_dump_json(indent=2))
    return EXIT_OK if report.all_valid else EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunkfile",
        description="Read large files in fixed-size chunks.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL.upper(),
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: %(default)s)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    dump_cmd = commands.add_parser("dump", help="Print a file chunk by chunk")
    dump_cmd.add_argument("--file", "--fname", dest="path", required=True)
    dump_cmd.add_argument(
        "--chunk-size", "--csiz", dest="chunk_size", type=int, default=settings.CHUNK_SIZE
    )
    dump_cmd.add_argument("-x", "--hex", dest="as_hex", action="store_true")
    dump_cmd.add_argument("--offset", type=int, default=0)

    manifest_cmd = commands.add_parser("manifest", help="Hash a file chunk by chunk")
    manifest_cmd.add_argument("--file", dest="path", required=True)
    manifest_cmd.add_argument(
        "--chunk-size", dest="chunk_size", type=int, default=settings.CHUNK_SIZE
    )
    manifest_cmd.add_argument("--output", "-o")

    verify_cmd = commands.add_parser("verify", help="Check a file against a manifest")
    verify_cmd.add_argument("--file", dest="path", required=True)
    verify_cmd.add_argument("--manifest", dest="manifest_path", required=True)
    verify_cmd.add_argument("--index", type=int)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        if args.command == "dump":
            return dump(args.path, args.chunk_size, args.as_hex, args.offset)
        if args.command == "manifest":
            return manifest(args.path, args.chunk_size, args.output)
        return verify(args.path, args.manifest_path, args.index)
    except (ChunkedFileError, ValidationError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
