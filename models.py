from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union


def to_iso_z(dt):
    """Convert a datetime to an RFC3339 string with trailing Z for UTC"""
    if not dt:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


class Paste(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    content: str
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_serializer("created_at")
    def serialize_created_at(self, v: datetime) -> str:
        return to_iso_z(v)

    @classmethod
    def from_row(cls, row) -> "Paste":
        return cls(id=row["id"], content=row["content"], created_at=row["created_at"])

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class PasteFound:
    paste: Paste


@dataclass(frozen=True)
class PasteMissing:
    paste_id: int


PasteLookup = Union[PasteFound, PasteMissing]
