"""JSON file helpers with write-then-rename semantics."""
import logging
import os
from pathlib import Path
from typing import Any
import aiofiles
import orjson

logger = logging.getLogger(__name__)


def _tmp_path(path: Path) -> Path:
    return path.with_name(f"{path.name}.tmp")


async def write_json_atomic(path: Path, document: Any) -> None:
    """Write a JSON document so readers never see a truncated file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = _tmp_path(path)
    async with aiofiles.open(tmp, "wb") as f:
        await f.write(orjson.dumps(document, option=orjson.OPT_INDENT_2))
    os.replace(tmp, path)
    logger.debug(f"Wrote {path}")


async def read_json(path: Path) -> Any:
    async with aiofiles.open(path, "rb") as f:
        return orjson.loads(await f.read())


def remove_file(path: Path) -> None:
    """Delete a file and any leftover temp file next to it."""
    for candidate in (path, _tmp_path(path)):
        if candidate.exists():
            candidate.unlink()
