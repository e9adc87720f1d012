"""Alert aggregation for end-of-run summaries.

The collector only records (rule_id, address) pairs as alerts stream past;
counting and ranking happen once, on demand, with pandas.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .rules.schemas import Alert


class AlertStats:
    """Counts alerts by rule id and by source address."""

    def __init__(self) -> None:
        self._rows: List[Dict[str, Optional[str]]] = []

    def __len__(self) -> int:
        return len(self._rows)

    def observe(self, alert: Alert) -> None:
        self._rows.append({
            "rule_id": alert.rule_id,
            "address": str(alert.address) if alert.address is not None else None,
        })

    def _frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._rows, columns=["rule_id", "address"])

    def by_rule(self) -> List[Tuple[str, int]]:
        """(rule_id, count) pairs, most frequent first."""
        counts = self._frame()["rule_id"].value_counts(sort=True)
        return [(str(k), int(v)) for k, v in counts.items()]

    def top_addresses(self, n: int = 5) -> List[Tuple[str, int]]:
        """Top ``n`` (address, count) pairs; alerts without an address are not counted."""
        counts = self._frame()["address"].dropna().value_counts(sort=True).head(n)
        return [(str(k), int(v)) for k, v in counts.items()]

    def summary(self, top_n: int = 5) -> Dict[str, Any]:
        return {
            "total_alerts": len(self),
            "by_rule": dict(self.by_rule()),
            "top_addresses": dict(self.top_addresses(top_n)),
        }
