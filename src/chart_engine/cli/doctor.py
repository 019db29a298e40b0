from __future__ import annotations

import sys

import matplotlib
import pandas as pd
import pydantic

from chart_engine.core.errors import ConfigError
from chart_engine.core.run_record import (
    RenderRecord,
    ensure_render_dir,
    generate_render_id,
    write_render_record,
)
from chart_engine.core.settings import load_settings
from chart_engine.viz.colors import scheme_names


def _package_version() -> str:
    # Prefer importlib.metadata so it works when installed
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("chart-aggregation-engine")
    except PackageNotFoundError:
        return "unknown"


def main(argv: list[str] | None = None) -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"settings: invalid ({e})")
        return 1

    outputs_base = settings.outputs_dir.resolve()
    render_id = generate_render_id(prefix="doctor")
    render_dir = ensure_render_dir(outputs_base, render_id)

    print("chart_engine doctor")
    print(f"python: {sys.version.split()[0]}")
    print(f"package_version: {_package_version()}")
    print(f"pandas: {pd.__version__}")
    print(f"matplotlib: {matplotlib.__version__} (backend {matplotlib.get_backend()})")
    print(f"pydantic: {pydantic.VERSION}")
    print(f"canvas: {settings.width}x{settings.height}")
    print(f"color_scheme: {settings.color_scheme}")
    print(f"outputs_dir: {outputs_base}")

    record = RenderRecord(render_id=render_id, width=settings.width, height=settings.height)
    record.checks["known_color_schemes"] = ",".join(scheme_names())
    record.checks["color_scheme_valid"] = str(settings.color_scheme in scheme_names())
    record.artifacts["render_record"] = str((render_dir / "render_record.json").resolve())

    path = write_render_record(render_dir, record)
    print(f"render_record: {path}")

    return 0
