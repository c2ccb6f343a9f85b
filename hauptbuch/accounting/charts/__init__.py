"""Registry of chart-of-accounts classification tables."""
from __future__ import annotations

from typing import Dict, Optional

from hauptbuch.accounting.classification import ChartMapping
from hauptbuch.accounting.charts.skr03 import SKR03
from hauptbuch.config import LedgerSettings, get_settings

_CHARTS: Dict[str, ChartMapping] = {SKR03.name: SKR03}


def register_chart(chart: ChartMapping) -> None:
    _CHARTS[chart.name.lower()] = chart


def get_chart(name: Optional[str] = None, settings: Optional[LedgerSettings] = None) -> ChartMapping:
    """Return a registered chart; defaults to the configured one."""
    name = (name or (settings or get_settings()).chart).lower()
    try:
        return _CHARTS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown chart of accounts '{name}'") from exc


__all__ = ["get_chart", "register_chart"]
