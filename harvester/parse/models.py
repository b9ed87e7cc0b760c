"""Data models for pages, checkpoints and snapshots."""
from datetime import datetime, timezone
from typing import Any, Optional, Sequence
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Pagination(BaseModel):
    """Pagination block reported by the API. Unusable values read as unknown."""

    pages: Optional[int] = None
    count: Optional[int] = None

    @field_validator("pages", "count", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return None


class PageResult(BaseModel):
    """Records of one fetched page plus optional pagination metadata."""

    records: list[Any] = Field(default_factory=list)
    pagination: Optional[Pagination] = None

    @field_validator("pagination", mode="before")
    @classmethod
    def _object_or_absent(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, Pagination)) else None

    @classmethod
    def from_payload(cls, payload: Any, records_fields: Sequence[str]) -> "PageResult":
        """Build from a decoded JSON body.

        Records come from the first field in `records_fields` that is present
        and not null, even when it is an empty list. A bare JSON array is taken
        as the record list itself.
        """
        if isinstance(payload, list):
            return cls(records=payload)
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
        records: Any = []
        for field in records_fields:
            if payload.get(field) is not None:
                records = payload[field]
                break
        return cls.model_validate({"records": records, "pagination": payload.get("pagination")})


class Checkpoint(BaseModel):
    """Resumable progress for one job, written after every merged page."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(..., ge=1, description="Next page to fetch")
    records: list[Any] = Field(default_factory=list)
    total_pages: Optional[int] = Field(default=None, alias="totalPages")
    total_count: Optional[int] = Field(default=None, alias="totalCount")
    cookies: dict[str, str] = Field(default_factory=dict)

    @field_validator("records", "cookies", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return [] if info.field_name == "records" else {}
        return value

    @field_validator("total_pages", "total_count", mode="before")
    @classmethod
    def _zero_as_unknown(cls, value: Any) -> Any:
        return value or None

    @classmethod
    def from_document(cls, document: Any, records_field: str) -> "Checkpoint":
        if not isinstance(document, dict):
            raise ValueError("Checkpoint document must be an object")
        data = dict(document)
        data["records"] = data.pop(records_field, None)
        return cls.model_validate(data)

    def to_document(self, records_field: str) -> dict[str, Any]:
        return {
            "page": self.page,
            records_field: self.records,
            "totalPages": self.total_pages,
            "totalCount": self.total_count,
            "cookies": self.cookies,
        }


class FinalSnapshot(BaseModel):
    """Complete harvest, written once at successful completion."""

    scraped_at: str = Field(default_factory=utc_timestamp)
    expected_total: Optional[int] = None
    records: list[Any] = Field(default_factory=list)
    cookies: dict[str, str] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.records)

    def to_document(self, records_field: str) -> dict[str, Any]:
        return {
            "scraped_at": self.scraped_at,
            "total": self.total,
            "expected_total": self.expected_total,
            records_field: self.records,
            "cookies": self.cookies,
        }
