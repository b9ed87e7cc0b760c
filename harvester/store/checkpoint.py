"""Checkpoint file for resuming an interrupted pagination job."""
import logging
from pathlib import Path
from typing import Optional
import orjson
from pydantic import ValidationError

from harvester.fetch.errors import CheckpointCorrupt
from harvester.parse.models import Checkpoint
from harvester.store.files import read_json, remove_file, write_json_atomic

logger = logging.getLogger(__name__)


class CheckpointStore:
    """Loads, overwrites and clears one job's checkpoint file."""

    def __init__(self, path: Path, records_field: str):
        self.path = path
        self.records_field = records_field

    def exists(self) -> bool:
        return self.path.exists()

    async def load(self) -> Optional[Checkpoint]:
        """Return the stored checkpoint, None if there is none.

        Raises CheckpointCorrupt when the file cannot be decoded or validated.
        """
        if not self.exists():
            return None
        try:
            document = await read_json(self.path)
            return Checkpoint.from_document(document, self.records_field)
        except (orjson.JSONDecodeError, ValidationError, ValueError) as e:
            raise CheckpointCorrupt(self.path, e) from e

    async def save(self, checkpoint: Checkpoint) -> None:
        """Replace the checkpoint. Write failures propagate to the caller."""
        await write_json_atomic(self.path, checkpoint.to_document(self.records_field))

    def clear(self) -> None:
        remove_file(self.path)
        logger.debug(f"Cleared checkpoint {self.path}")
