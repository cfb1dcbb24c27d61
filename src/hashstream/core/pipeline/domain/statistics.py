"""Pipeline statistics formatting and aggregation.

This module provides utilities for formatting and aggregating pipeline statistics:
- format_statistics(): Format statistics into human-readable report
- StatisticsAggregator: Aggregate and export statistics in various formats
"""

from __future__ import annotations

from typing import Any

import orjson

from hashstream.core.pipeline.utils import (
    DecoderStatistics,
    EncoderStatistics,
    QueueStatistics,
    TransformStatistics,
)


def _rate(part: int, total: int) -> float:
    return (part / total * 100) if total > 0 else 0.0


def format_statistics(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    decoder_stats: DecoderStatistics,
    request_queue_stats: QueueStatistics,
    transform_stats: TransformStatistics,
    response_queue_stats: QueueStatistics,
    encoder_stats: EncoderStatistics,
    total_duration: float,
) -> str:
    """Format pipeline statistics into a human-readable report.

    Args:
        decoder_stats: Decoder metrics.
        request_queue_stats: Metrics of the decoder -> transformer queue.
        transform_stats: Transformer metrics.
        response_queue_stats: Metrics of the transformer -> encoder queue.
        encoder_stats: Encoder metrics.
        total_duration: Total service run time in seconds.

    Returns:
        A formatted multi-line string containing all statistics.
    """
    total_processed = transform_stats.items_processed
    success_rate = _rate(transform_stats.successes, total_processed)
    failure_rate = _rate(transform_stats.failures, total_processed)

    lines = [
        "",
        "=" * 60,
        "                  HASHSTREAM STATISTICS",
        "=" * 60,
        "",
        "Timing:",
        f"  - Total run time:       {total_duration:.2f}s",
        "",
        "Decoder:",
        f"  - Lines read:           {decoder_stats.lines_read:,}",
        f"  - Requests accepted:    {decoder_stats.requests_accepted:,}",
        f"  - Lines rejected:       {decoder_stats.lines_rejected:,}",
        f"  - Read errors:          {decoder_stats.read_errors:,}",
        "",
        "Request queue:",
        f"  - Items put:            {request_queue_stats.items_put:,}",
        f"  - Items got:            {request_queue_stats.items_got:,}",
        f"  - Peak size:            {request_queue_stats.max_size:,}",
        "",
        "Transformer:",
        f"  - Items processed:      {transform_stats.items_processed:,}",
        f"  - Successful:           {transform_stats.successes:,} ({success_rate:.2f}%)",
        f"  - Failed:               {transform_stats.failures:,} ({failure_rate:.2f}%)",
        "",
        "Response queue:",
        f"  - Items put:            {response_queue_stats.items_put:,}",
        f"  - Items got:            {response_queue_stats.items_got:,}",
        f"  - Peak size:            {response_queue_stats.max_size:,}",
        "",
        "Encoder:",
        f"  - Lines written:        {encoder_stats.lines_written:,}",
        f"  - Write failures:       {encoder_stats.write_failures:,}",
        "",
        "=" * 60,
        "",
    ]

    return "\n".join(lines)


class StatisticsAggregator:
    """Aggregates and exports pipeline statistics in various formats.

    This class collects the statistics of one service run and exports them
    as a dict, JSON or the formatted text report.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        decoder_stats: DecoderStatistics,
        request_queue_stats: QueueStatistics,
        transform_stats: TransformStatistics,
        response_queue_stats: QueueStatistics,
        encoder_stats: EncoderStatistics,
        total_duration: float,
    ) -> None:
        self.decoder_stats = decoder_stats
        self.request_queue_stats = request_queue_stats
        self.transform_stats = transform_stats
        self.response_queue_stats = response_queue_stats
        self.encoder_stats = encoder_stats
        self.total_duration = total_duration

    @staticmethod
    def _queue_dict(stats: QueueStatistics) -> dict[str, int]:
        return {
            "items_put": stats.items_put,
            "items_got": stats.items_got,
            "max_size": stats.max_size,
        }

    def aggregate(self) -> dict[str, Any]:
        """Aggregate all statistics into a structured dictionary.

        Returns:
            Dictionary containing all pipeline statistics organized by stage.
        """
        total_processed = self.transform_stats.items_processed

        return {
            "timing": {
                "total_duration": self.total_duration,
                "total_duration_formatted": f"{self.total_duration:.2f}s",
            },
            "decoder": {
                "lines_read": self.decoder_stats.lines_read,
                "requests_accepted": self.decoder_stats.requests_accepted,
                "lines_rejected": self.decoder_stats.lines_rejected,
                "read_errors": self.decoder_stats.read_errors,
            },
            "request_queue": self._queue_dict(self.request_queue_stats),
            "transformer": {
                "items_processed": total_processed,
                "successes": self.transform_stats.successes,
                "failures": self.transform_stats.failures,
                "success_rate": _rate(self.transform_stats.successes, total_processed),
                "failure_rate": _rate(self.transform_stats.failures, total_processed),
            },
            "response_queue": self._queue_dict(self.response_queue_stats),
            "encoder": {
                "lines_written": self.encoder_stats.lines_written,
                "write_failures": self.encoder_stats.write_failures,
            },
        }

    def to_dict(self) -> dict[str, Any]:
        return self.aggregate()

    def to_json(self, indent: bool = True) -> str:
        """Export statistics as a JSON string.

        Args:
            indent: Indent with two spaces (default: True).

        Returns:
            JSON-formatted string containing all pipeline statistics.
        """
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(self.aggregate(), option=option).decode("utf-8")

    def format_report(self) -> str:
        """Format statistics using the standard format_statistics function."""
        return format_statistics(
            decoder_stats=self.decoder_stats,
            request_queue_stats=self.request_queue_stats,
            transform_stats=self.transform_stats,
            response_queue_stats=self.response_queue_stats,
            encoder_stats=self.encoder_stats,
            total_duration=self.total_duration,
        )
