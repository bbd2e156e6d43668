"""
BatchPartition model: the valid/invalid split of one uploaded batch.
"""

from typing import Any

from pydantic import BaseModel, Field


class BatchPartition(BaseModel):
    """
    Valid and invalid annotated records of one batch, each in original row order.

    Attributes:
        valid: Records with is_valid == True
        invalid: All other records
    """

    valid: list[dict[str, Any]] = Field(default_factory=list)
    invalid: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def valid_count(self) -> int:
        return len(self.valid)

    @property
    def invalid_count(self) -> int:
        return len(self.invalid)

    @property
    def total_count(self) -> int:
        return self.valid_count + self.invalid_count
