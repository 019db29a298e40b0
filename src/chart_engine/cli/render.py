"""CLI command: aggregate a CSV snapshot and render one chart to PNG."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from chart_engine.analytics.aggregation import aggregate
from chart_engine.analytics.templates import chart_kind_for, is_configuration_complete
from chart_engine.core.config_model import ChartConfiguration, load_chart_configuration
from chart_engine.core.errors import ConfigError, DataSourceError
from chart_engine.core.run_record import (
    RenderRecord,
    ensure_render_dir,
    generate_render_id,
    write_render_record,
)
from chart_engine.core.settings import EngineSettings, load_settings
from chart_engine.core.utils_hash import sha256_file, sha256_payload
from chart_engine.data.source import load_csv_table
from chart_engine.reports.summary_generator import generate_chart_summary
from chart_engine.viz.chart_view import ChartView

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="render",
        description="Aggregate a CSV snapshot with a chart configuration and render it to PNG.",
    )
    p.add_argument("--csv", required=True, help="Path to the CSV file with the source rows.")
    p.add_argument("--config", required=True, help="Chart configuration file (YAML or JSON).")
    p.add_argument(
        "--out",
        default=None,
        help="PNG path. Default: <outputs>/renders/<render_id>/chart.png",
    )
    p.add_argument("--width", type=int, default=None, help="Canvas width in px.")
    p.add_argument("--height", type=int, default=None, help="Canvas height in px.")
    p.add_argument(
        "--no-animation",
        action="store_true",
        help="Draw the final frame directly instead of scheduling enter transitions.",
    )
    p.add_argument("--env-file", default=None, help="Optional .env file with CHART_ENGINE_* settings.")
    return p


def _with_settings_defaults(config: ChartConfiguration, settings: EngineSettings) -> ChartConfiguration:
    # colorScheme absent from the file falls back to CHART_ENGINE_COLOR_SCHEME
    if "color_scheme" in config.model_fields_set:
        return config
    return config.updated(color_scheme=settings.color_scheme)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.env_file)
    except ConfigError as e:
        print(f"Settings error: {e}")
        return 2
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = _with_settings_defaults(load_chart_configuration(args.config), settings)
        table = load_csv_table(args.csv)
    except (ConfigError, DataSourceError) as e:
        logger.error("%s", e)
        print(f"Render failed: {e}")
        return 1

    width = args.width or settings.width
    height = args.height or settings.height

    data = aggregate(table.frame, config, table.columns)
    view = ChartView(width=width, height=height)
    rendered = view.render(config, data, animate=not args.no_animation)

    render_id = generate_render_id()
    render_dir = ensure_render_dir(settings.outputs_dir.resolve(), render_id)
    png_path = Path(args.out) if args.out else render_dir / "chart.png"
    try:
        view.save_png(png_path)
    finally:
        view.close()

    summary_path = render_dir / "summary.txt"
    summary_path.write_text(generate_chart_summary(data, config), encoding="utf-8")

    record = RenderRecord(
        render_id=render_id,
        template_id=config.template_id,
        chart_kind=chart_kind_for(config.template_id).value,
        input_path=str(Path(args.csv).resolve()),
        used_sample_data=not is_configuration_complete(config),
        row_count=len(table.frame),
        width=width,
        height=height,
    )
    record.config_hashes["chart_configuration"] = sha256_payload(
        config.model_dump(mode="json", by_alias=True, exclude_none=True)
    )
    record.config_hashes["input_csv"] = sha256_file(args.csv)
    record.artifacts["chart_png"] = str(png_path.resolve())
    record.artifacts["summary_txt"] = str(summary_path.resolve())
    if rendered.placeholder:
        record.artifacts["placeholder"] = "true"
    record_path = write_render_record(render_dir, record)

    print("Chart rendered successfully.")
    print(f"Render ID: {render_id}")
    print(f"Chart PNG: {png_path}")
    print(f"Summary: {summary_path}")
    print(f"Render record: {record_path}")
    return 0
