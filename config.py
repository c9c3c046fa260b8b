from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from core.viewport import Viewport


@dataclass
class ChartConfig:
    width: float = 928.0
    height: float = 500.0
    margin_top: float = 20.0
    margin_right: float = 30.0
    margin_bottom: float = 30.0
    margin_left: float = 40.0
    site_id: str = ""
    api_key: str = ""
    base_url: str = "https://monitoringapi.solaredge.com"
    utc_offset: str = "+02:00"
    timeout_s: float = 15.0
    url: str = ""
    json_path: str = ""
    theme: str = "Light"
    ini_path: Path | None = None

    @classmethod
    def load(
        cls,
        ini_path: str | Path | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> "ChartConfig":
        cfg = cls()
        path = Path(ini_path or "config.ini")
        if path.exists():
            import configparser

            parser = configparser.ConfigParser()
            parser.read(path)
            vp_section = parser["viewport"] if "viewport" in parser else None
            if vp_section:
                cfg.width = vp_section.getfloat("width", fallback=cfg.width)
                cfg.height = vp_section.getfloat("height", fallback=cfg.height)
                cfg.margin_top = vp_section.getfloat("margin_top", fallback=cfg.margin_top)
                cfg.margin_right = vp_section.getfloat("margin_right", fallback=cfg.margin_right)
                cfg.margin_bottom = vp_section.getfloat(
                    "margin_bottom", fallback=cfg.margin_bottom
                )
                cfg.margin_left = vp_section.getfloat("margin_left", fallback=cfg.margin_left)

            source_section = parser["source"] if "source" in parser else None
            if source_section:
                cfg.site_id = source_section.get("site_id", fallback=cfg.site_id).strip()
                cfg.api_key = source_section.get("api_key", fallback=cfg.api_key).strip()
                cfg.base_url = source_section.get("base_url", fallback=cfg.base_url).strip()
                cfg.utc_offset = source_section.get(
                    "utc_offset", fallback=cfg.utc_offset
                ).strip()
                cfg.timeout_s = source_section.getfloat("timeout_s", fallback=cfg.timeout_s)
                cfg.url = source_section.get("url", fallback=cfg.url).strip()
                cfg.json_path = source_section.get("json_path", fallback=cfg.json_path).strip()

            ui_section = parser["ui"] if "ui" in parser else None
            if ui_section:
                cfg.theme = ui_section.get("theme", fallback=cfg.theme)

        env = os.environ if environ is None else environ
        # Credentials in the environment win over the file.
        if env.get("SITE_ID"):
            cfg.site_id = env["SITE_ID"].strip()
        if env.get("API_KEY"):
            cfg.api_key = env["API_KEY"].strip()
        cfg.ini_path = path
        return cfg

    def viewport(self) -> Viewport:
        return Viewport(
            width=self.width,
            height=self.height,
            margin_top=self.margin_top,
            margin_right=self.margin_right,
            margin_bottom=self.margin_bottom,
            margin_left=self.margin_left,
        )

    def save(self) -> None:
        """Persist the settings; an API key already in the file is kept, one from the environment is never written."""
        if self.ini_path is None:
            return
        import configparser

        existing = configparser.ConfigParser()
        existing.read(self.ini_path)
        stored_key = existing.get("source", "api_key", fallback="")
        parser = configparser.ConfigParser()
        parser["viewport"] = {
            "width": f"{self.width:g}",
            "height": f"{self.height:g}",
            "margin_top": f"{self.margin_top:g}",
            "margin_right": f"{self.margin_right:g}",
            "margin_bottom": f"{self.margin_bottom:g}",
            "margin_left": f"{self.margin_left:g}",
        }
        parser["source"] = {
            "site_id": self.site_id,
            "base_url": self.base_url,
            "utc_offset": self.utc_offset,
            "timeout_s": f"{self.timeout_s:.3f}",
            "url": self.url,
            "json_path": self.json_path,
        }
        if stored_key:
            parser["source"]["api_key"] = stored_key
        parser["ui"] = {
            "theme": self.theme,
        }
        with self.ini_path.open("w") as fh:
            parser.write(fh)
