"""
SummaryMetrics model: aggregate statistics over every valid partition.
"""

from pydantic import BaseModel, Field

# Fixed row order of the summary report
METRIC_ORDER = (
    "total_records",
    "total_subtotal",
    "avg_subtotal",
    "store_orders",
    "online_orders",
)

# Metrics rendered with two fraction digits
DECIMAL_METRICS = frozenset({"total_subtotal", "avg_subtotal"})


class SummaryMetrics(BaseModel):
    """
    Fixed-schema summary recomputed in full on every aggregation run.

    Attributes:
        total_records: Number of counted records
        total_subtotal: Sum of numeric subtotals (non-numeric contribute 0)
        avg_subtotal: total_subtotal / total_records, or 0 when empty
        store_orders: Records with order_type "S"
        online_orders: Records with order_type "E"
    """

    total_records: int = Field(0, ge=0)
    total_subtotal: float = 0.0
    avg_subtotal: float = 0.0
    store_orders: int = Field(0, ge=0)
    online_orders: int = Field(0, ge=0)

    def as_rows(self) -> list[tuple[str, int | float]]:
        """Return (metric, value) pairs in report order."""
        return [(name, getattr(self, name)) for name in METRIC_ORDER]

    class Config:
        json_schema_extra = {
            "example": {
                "total_records": 2,
                "total_subtotal": 30.0,
                "avg_subtotal": 15.0,
                "store_orders": 1,
                "online_orders": 1
            }
        }
