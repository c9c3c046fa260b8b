import json
from pathlib import Path

import app
from config import ChartConfig

PAYLOAD = {
    "energy": {
        "unit": "Wh",
        "values": [
            {"date": "2024-05-01T06:00:00+02:00", "value": 0.0},
            {"date": "2024-05-01T06:15:00+02:00", "value": 12.5},
        ],
    }
}


def test_save_config_persists_cli_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("SITE_ID", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    data = tmp_path / "energy.json"
    data.write_text(json.dumps(PAYLOAD))
    ini_path = tmp_path / "config.ini"
    out = tmp_path / "chart.svg"

    code = app.main(
        config_path=str(ini_path),
        json_path=str(data),
        theme="Midnight",
        svg_out=str(out),
        save_config=True,
    )

    assert code == 0
    assert out.read_text().startswith("<svg")
    saved = ChartConfig.load(ini_path, environ={})
    assert saved.theme == "Midnight"
    assert saved.json_path == str(data)


def test_missing_source_exits_with_usage_error(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("SITE_ID", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    assert app.main(config_path=str(tmp_path / "none.ini")) == 2
    assert not (tmp_path / "none.ini").exists()
