import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping

from .charts import Padding

DEFAULT_EXPORT_FILENAME = "student_performance_report.csv"

_NUMERIC_FIELDS = [
    "search_debounce_seconds",
    "radar_width",
    "radar_height",
    "radar_margin",
    "radar_label_offset",
    "comparison_width",
    "comparison_height",
]


@dataclass
class DashboardConfig:
    """Tunable dimensions and timings for the dashboard."""

    search_debounce_seconds: float = 0.15
    radar_width: float = 400
    radar_height: float = 400
    radar_margin: float = 50
    radar_label_offset: float = 25
    comparison_width: float = 600
    comparison_height: float = 350
    comparison_padding: Padding = field(default_factory=Padding)
    export_filename: str = DEFAULT_EXPORT_FILENAME

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "DashboardConfig":
        known = set(_NUMERIC_FIELDS) | {"comparison_padding", "export_filename"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        values: Dict[str, object] = {}
        for key in _NUMERIC_FIELDS:
            if key not in data:
                continue
            try:
                number = float(data[key])
            except (TypeError, ValueError):
                raise ValueError(f"Config value for '{key}' must be numeric") from None
            if number < 0:
                raise ValueError(f"Config value for '{key}' must be non-negative")
            values[key] = number

        if "comparison_padding" in data:
            raw = data["comparison_padding"]
            if not isinstance(raw, Mapping):
                raise ValueError("comparison_padding must be an object with top/right/bottom/left")
            extra = sorted(set(raw) - {"top", "right", "bottom", "left"})
            if extra:
                raise ValueError(f"Unknown comparison_padding keys: {', '.join(extra)}")
            values["comparison_padding"] = Padding(**{side: float(value) for side, value in raw.items()})

        if "export_filename" in data:
            filename = str(data["export_filename"] or "").strip()
            if not filename:
                raise ValueError("export_filename must not be empty")
            values["export_filename"] = filename

        config = cls(**values)
        if config.radar_margin * 2 >= min(config.radar_width, config.radar_height):
            raise ValueError("radar_margin leaves no room for the chart")
        return config

    def to_dict(self) -> Dict[str, object]:
        return {
            "search_debounce_seconds": self.search_debounce_seconds,
            "radar_width": self.radar_width,
            "radar_height": self.radar_height,
            "radar_margin": self.radar_margin,
            "radar_label_offset": self.radar_label_offset,
            "comparison_width": self.comparison_width,
            "comparison_height": self.comparison_height,
            "comparison_padding": {
                "top": self.comparison_padding.top,
                "right": self.comparison_padding.right,
                "bottom": self.comparison_padding.bottom,
                "left": self.comparison_padding.left,
            },
            "export_filename": self.export_filename,
        }


def load_config(path: Path) -> DashboardConfig:
    if not path.exists():
        return DashboardConfig()

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("Dashboard config JSON must be an object")
    return DashboardConfig.from_dict(raw)
