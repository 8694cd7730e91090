from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """Represents an account record.

    Serialized with the ``Id``/``Name`` field names so the stored bytes stay
    readable by other tooling working on the same store file.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="Id")
    name: str = Field(..., alias="Name")

    def to_bytes(self) -> bytes:
        """Encode the account as compact UTF-8 JSON."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Account":
        """Decode stored bytes. Raises ``pydantic.ValidationError`` on bad input."""
        return cls.model_validate_json(raw)


class SeedResult(BaseModel):
    """Outcome of a bulk seed run."""

    requested: int
    written: int = 0
    failed: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
