"""Record identity used to deduplicate across pages and runs."""
from typing import Any, Hashable, Iterable
import orjson


def identity_key(record: Any) -> Hashable:
    """Return `id`, else `slug`, else the serialized length of the record.

    The length fallback collides easily; the API is expected to always send
    an `id`. Object and array keys compare by their serialized form.
    """
    if isinstance(record, dict):
        for field in ("id", "slug"):
            key = record.get(field)
            if key is None:
                continue
            if isinstance(key, (dict, list)):
                return orjson.dumps(key, option=orjson.OPT_SORT_KEYS)
            return key
    return len(orjson.dumps(record))


class RecordIdentitySet:
    """Identity keys already merged during this job."""

    def __init__(self, records: Iterable[Any] = ()):
        self._seen: set[Hashable] = set()
        for record in records:
            self._seen.add(identity_key(record))

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, record: Any) -> bool:
        return identity_key(record) in self._seen

    def add(self, record: Any) -> bool:
        """Mark a record as seen. Returns False if it was already known."""
        key = identity_key(record)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True
