"""
InvocationResult model returned by every pipeline entry point.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class InvocationResult(BaseModel):
    """
    Outcome of one pipeline invocation.

    Infrastructure failures are reported here instead of being raised.

    Attributes:
        status: "success" or "failure"
        message: Human-readable summary or error message
        details: Counts, output locations and similar facts about the run
    """

    status: Literal["success", "failure"]
    message: str = ""
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(cls, message: str = "", **details: Any) -> "InvocationResult":
        return cls(status="success", message=message, details=details)

    @classmethod
    def failure(cls, message: str, **details: Any) -> "InvocationResult":
        return cls(status="failure", message=message, details=details)
