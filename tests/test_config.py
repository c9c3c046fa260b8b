from pathlib import Path

import pytest

from config import ChartConfig
from core.viewport import Viewport


def test_chart_config_defaults_when_file_missing(tmp_path: Path):
    cfg = ChartConfig.load(tmp_path / "missing.ini", environ={})
    assert cfg.viewport() == Viewport(928.0, 500.0, 20.0, 30.0, 30.0, 40.0)
    assert cfg.site_id == ""
    assert cfg.theme == "Light"


def test_chart_config_parse(tmp_path: Path):
    ini_path = tmp_path / "config.ini"
    ini_path.write_text(
        """
[viewport]
width = 640
height = 320
margin_left = 50

[source]
site_id = 4242
utc_offset = +01:00
timeout_s = 3.5

[ui]
theme = Midnight
""".strip()
    )

    cfg = ChartConfig.load(ini_path, environ={})
    vp = cfg.viewport()
    assert (vp.width, vp.height, vp.margin_left, vp.margin_top) == (640.0, 320.0, 50.0, 20.0)
    assert cfg.site_id == "4242"
    assert cfg.utc_offset == "+01:00"
    assert cfg.timeout_s == pytest.approx(3.5)
    assert cfg.theme == "Midnight"


def test_environment_overrides_credentials(tmp_path: Path):
    ini_path = tmp_path / "config.ini"
    ini_path.write_text("[source]\nsite_id = 1\napi_key = from-file\n")
    cfg = ChartConfig.load(ini_path, environ={"SITE_ID": "99", "API_KEY": "from-env"})
    assert cfg.site_id == "99"
    assert cfg.api_key == "from-env"


def test_chart_config_save_round_trip_without_api_key(tmp_path: Path):
    ini_path = tmp_path / "config.ini"
    cfg = ChartConfig.load(ini_path, environ={})
    cfg.width = 800
    cfg.site_id = "777"
    cfg.api_key = "secret"
    cfg.save()

    written = ini_path.read_text()
    assert "width = 800" in written
    assert "site_id = 777" in written
    assert "secret" not in written

    reloaded = ChartConfig.load(ini_path, environ={})
    assert reloaded.width == 800.0
    assert reloaded.api_key == ""


def test_save_keeps_api_key_already_in_file(tmp_path: Path):
    ini_path = tmp_path / "config.ini"
    ini_path.write_text("[source]\nsite_id = 1\napi_key = from-file\n")
    cfg = ChartConfig.load(ini_path, environ={"API_KEY": "from-env"})
    cfg.theme = "Midnight"
    cfg.save()

    written = ini_path.read_text()
    assert "from-env" not in written
    reloaded = ChartConfig.load(ini_path, environ={})
    assert reloaded.api_key == "from-file"
    assert reloaded.theme == "Midnight"
