"""Write generated declarations to disk."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_or_create_interface_file(interface_string: str, gen_file_path: Path | str) -> Path:
    """Write the generated text, creating the destination directory if missing.

    Returns:
        The path written to.
    """
    gen_file_path = Path(gen_file_path)
    try:
        gen_file_path.write_text(interface_string, encoding="utf-8")
    except FileNotFoundError:
        logger.info("Path %s not found; creating...", gen_file_path)
        gen_file_path.parent.mkdir(parents=True, exist_ok=True)
        gen_file_path.write_text(interface_string, encoding="utf-8")
    return gen_file_path
