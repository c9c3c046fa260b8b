# app.py
import logging
import sys
from functools import partial

from config import ChartConfig
from core.energy_source import SolarEdgeClient, fetch_dataset, load_dataset_file


def build_source(cfg: ChartConfig):
    """Pick the data source: a local JSON file, a plain URL, or the SolarEdge API."""
    if cfg.json_path:
        return partial(load_dataset_file, cfg.json_path)
    if cfg.url:
        return partial(fetch_dataset, cfg.url, timeout=cfg.timeout_s)
    client = SolarEdgeClient(
        cfg.site_id,
        cfg.api_key,
        utc_offset=cfg.utc_offset,
        base_url=cfg.base_url,
        timeout=cfg.timeout_s,
    )
    return client.fetch_dataset


def export_svg(cfg: ChartConfig, out_path: str) -> int:
    from core.chart_model import build_chart
    from core.errors import ChartError
    from core.svg_export import write_chart_svg
    from ui.themes import resolve_theme

    theme = resolve_theme(cfg.theme)
    try:
        dataset = build_source(cfg)()
        model = build_chart(dataset, cfg.viewport())
    except ChartError as exc:
        logging.getLogger(__name__).error("Export failed: %s", exc)
        return 1
    write_chart_svg(
        out_path,
        model,
        line_color=theme.line_color,
        fill_color=theme.fill_color,
        foreground=theme.foreground,
        grid_alpha=theme.grid_alpha,
    )
    return 0


def main(
    *,
    config_path: str | None = None,
    json_path: str | None = None,
    url: str | None = None,
    site_id: str | None = None,
    theme: str | None = None,
    svg_out: str | None = None,
    save_config: bool = False,
) -> int:
    cfg = ChartConfig.load(config_path)
    if json_path:
        cfg.json_path = json_path
    if url:
        cfg.url = url
    if site_id:
        cfg.site_id = site_id
    if theme:
        cfg.theme = theme
    if save_config:
        cfg.save()
        logging.getLogger(__name__).info("Saved settings to %s", cfg.ini_path)

    if not (cfg.json_path or cfg.url or (cfg.site_id and cfg.api_key)):
        print(
            "No data source: pass --json/--url or set SITE_ID and API_KEY.",
            file=sys.stderr,
        )
        return 2

    if svg_out:
        return export_svg(cfg, svg_out)

    from PySide6 import QtWidgets
    from ui.chart_window import ChartWindow

    app = QtWidgets.QApplication(sys.argv)
    w = ChartWindow(cfg.viewport(), theme=cfg.theme)
    w.show()
    w.load(build_source(cfg))
    return app.exec()


if __name__ == "__main__":
    import argparse
    p = argparse.ArgumentParser()
    p.add_argument("--config")
    p.add_argument("--json", dest="json_path")
    p.add_argument("--url")
    p.add_argument("--site-id")
    p.add_argument("--theme")
    p.add_argument("--export-svg", dest="svg_out")
    p.add_argument("--save-config", action="store_true", help="write the merged settings back to the config file")
    p.add_argument("--log-level", default="INFO")
    args = p.parse_args()
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(
        main(
            config_path=args.config,
            json_path=args.json_path,
            url=args.url,
            site_id=args.site_id,
            theme=args.theme,
            svg_out=args.svg_out,
            save_config=args.save_config,
        )
    )
