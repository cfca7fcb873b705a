"""
dump.py — Chunk Rendering
===========================
Hex and text rendering of chunk contents for the dump command.
"""

from typing import List

from chunkfile.core.reader import Chunk, ChunkedFileReader

SEPARATOR = "=" * 31


def to_hex(data: bytes, width: int = 16) -> str:
    """Render bytes as ``0x..`` tokens, ``width`` tokens per line."""
    if width <= 0:
        raise ValueError("Hex width must be a positive integer")
    lines = []
    for start in range(0, len(data), width):
        lines.append(" ".join(f"0x{byte:02x}" for byte in data[start : start + width]))
    return "\n".join(lines)


def to_text(data: bytes) -> str:
    # Chunk boundaries can split multi-byte sequences.
    return data.decode("utf-8", errors="replace")


def render_chunk(
    reader: ChunkedFileReader, chunk: Chunk, as_hex: bool = False, width: int = 16
) -> str:
    """
    Render one chunk with a banner showing where the reader stands.

    Call this right after the chunk was read so the banner reflects it.
    """
    body = to_hex(chunk.data, width) if as_hex else to_text(chunk.data)
    lines: List[str] = [
        SEPARATOR,
        f"remaining {reader.remaining_bytes}",
        f"currently at pos {reader.position} of {reader.file_size}",
        SEPARATOR,
        body,
    ]
    return "\n".join(lines)
