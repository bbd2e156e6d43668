"""
Summary report writer.

The report is a two-column CSV: a ``metric,value`` header followed by one row
per metric in fixed order. Decimal metrics carry exactly two fraction digits.
"""

from src.core.models import DECIMAL_METRICS, SummaryMetrics
from src.observability.logger import get_logger
from src.storage import ObjectStore

logger = get_logger(__name__)

CSV_CONTENT_TYPE = "text/csv"
HEADER = "metric,value"


class SummaryWriter:
    """
    Formats and persists SummaryMetrics.
    """

    @staticmethod
    def format_value(metric: str, value: int | float) -> str:
        if metric in DECIMAL_METRICS:
            return f"{value:.2f}"
        return str(int(value))

    def format(self, metrics: SummaryMetrics) -> str:
        """
        Render the summary CSV.

        Example:
            metric,value
            total_records,2
            total_subtotal,30.00
            avg_subtotal,15.00
            store_orders,1
            online_orders,1
        """
        lines = [HEADER]
        for metric, value in metrics.as_rows():
            lines.append(f"{metric},{self.format_value(metric, value)}")
        return "\n".join(lines) + "\n"

    def write(self, store: ObjectStore, location: str, metrics: SummaryMetrics) -> str:
        """
        Persist the summary report at ``location``.

        Raises:
            StorageError: If the write fails
        """
        store.put(location, self.format(metrics).encode("utf-8"), CSV_CONTENT_TYPE)
        logger.info(f"Wrote summary report to {location}", extra={"location": location})
        return location
