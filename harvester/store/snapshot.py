"""Final output files."""
import logging
from pathlib import Path
from typing import Any

from harvester.parse.models import FinalSnapshot
from harvester.store.files import write_json_atomic

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """Writes the completed harvest for one job."""

    def __init__(self, path: Path, records_field: str):
        self.path = path
        self.records_field = records_field

    async def write(self, snapshot: FinalSnapshot) -> None:
        await write_json_atomic(self.path, snapshot.to_document(self.records_field))
        logger.info(f"Saved {snapshot.total} {self.records_field} to {self.path.name}")

    async def write_document(self, document: dict[str, Any]) -> None:
        """Write an arbitrary document, used by one-shot jobs."""
        await write_json_atomic(self.path, document)
