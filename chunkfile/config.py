"""
config.py — Chunkfile Configuration
=====================================
"""

import os


class Settings:
    """Chunkfile defaults from environment."""

    CHUNK_SIZE: int = int(os.getenv("CHUNKFILE_CHUNK_SIZE", "1024"))  # 1 KB
    HEX_WIDTH: int = int(os.getenv("CHUNKFILE_HEX_WIDTH", "16"))
    LOG_LEVEL: str = os.getenv("CHUNKFILE_LOG_LEVEL", "INFO")


settings = Settings()
