import json
from pathlib import Path

import pytest

from student_dashboard.charts import Padding
from student_dashboard.config import DashboardConfig, load_config


def test_defaults():
    config = DashboardConfig()
    assert config.search_debounce_seconds == 0.15
    assert config.radar_margin == 50
    assert config.comparison_padding == Padding(30, 30, 50, 50)
    assert config.export_filename == "student_performance_report.csv"


def test_from_dict_roundtrip():
    data = DashboardConfig(radar_width=500, comparison_padding=Padding(10, 10, 40, 40)).to_dict()
    assert DashboardConfig.from_dict(data) == DashboardConfig(radar_width=500, comparison_padding=Padding(10, 10, 40, 40))


@pytest.mark.parametrize(
    "data",
    [
        {"unknown": 1},
        {"radar_width": "wide"},
        {"search_debounce_seconds": -1},
        {"comparison_padding": {"middle": 4}},
        {"comparison_padding": 5},
        {"export_filename": "  "},
        {"radar_width": 80, "radar_height": 80, "radar_margin": 50},
    ],
)
def test_from_dict_rejects_bad_values(data):
    with pytest.raises(ValueError):
        DashboardConfig.from_dict(data)


def test_load_config_missing_file(tmp_path: Path):
    assert load_config(tmp_path / "nope.json") == DashboardConfig()


def test_load_config_reads_json(tmp_path: Path):
    path = tmp_path / "dashboard_config.json"
    path.write_text(json.dumps({"radar_width": 320, "search_debounce_seconds": 0.3}), encoding="utf-8")
    config = load_config(path)
    assert config.radar_width == 320
    assert config.search_debounce_seconds == 0.3


def test_load_config_rejects_non_object(tmp_path: Path):
    path = tmp_path / "dashboard_config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
