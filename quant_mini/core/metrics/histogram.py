"""Relative-error latency histogram.

Samples are mapped to logarithmically spaced buckets so that every bucket's
representative value is within ``relative_accuracy`` of any sample stored in
it. Updates are O(1); quantile queries walk the occupied buckets, whose
number is bounded by the logarithm of the value range, not by the sample
count.
"""

from __future__ import annotations

import math

DEFAULT_RELATIVE_ACCURACY: float = 0.001


class LatencyHistogram:
    """Unbounded-count histogram with fixed relative-error quantiles.

    Not thread-safe on its own: the metrics aggregator guards it.
    """

    def __init__(self, relative_accuracy: float = DEFAULT_RELATIVE_ACCURACY) -> None:
        if not 0.0 < relative_accuracy < 1.0:
            raise ValueError(f"Invalid relative_accuracy: {relative_accuracy}")

        self.relative_accuracy = relative_accuracy
        self._gamma = (1.0 + relative_accuracy) / (1.0 - relative_accuracy)
        self._log_gamma = math.log(self._gamma)

        self._buckets: dict[int, int] = {}
        self._sorted_keys: list[int] | None = []
        self._zero_count = 0

        self.count = 0
        self.total = 0.0
        self.min_value = math.inf
        self.max_value = 0.0

    def record(self, value: float) -> None:
        """Record one sample (must be >= 0)."""
        if value < 0:
            raise ValueError(f"Histogram samples must be non-negative: {value}")

        if value == 0:
            self._zero_count += 1
        else:
            key = self._key(value)
            if key in self._buckets:
                self._buckets[key] += 1
            else:
                self._buckets[key] = 1
                self._sorted_keys = None

        self.count += 1
        self.total += value
        self.min_value = min(self.min_value, value)
        self.max_value = max(self.max_value, value)

    def value_at_quantile(self, quantile: float) -> float:
        """Estimate the value at ``quantile`` in [0, 1]; 0.0 when empty."""
        if not 0.0 <= quantile <= 1.0:
            raise ValueError(f"Quantile out of range: {quantile}")
        if self.count == 0:
            return 0.0

        rank = max(1, math.ceil(quantile * self.count))
        if rank <= self._zero_count:
            return 0.0

        seen = self._zero_count
        for key in self._keys():
            seen += self._buckets[key]
            if seen >= rank:
                estimate = self._representative(key)
                return min(max(estimate, self.min_value), self.max_value)

        return self.max_value

    def _key(self, value: float) -> int:
        return math.ceil(math.log(value) / self._log_gamma)

    def _representative(self, key: int) -> float:
        return 2.0 * self._gamma**key / (self._gamma + 1.0)

    def _keys(self) -> list[int]:
        if self._sorted_keys is None:
            self._sorted_keys = sorted(self._buckets)
        return self._sorted_keys
