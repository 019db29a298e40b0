from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from chart_engine.cli.__main__ import main
from chart_engine.cli.render import _with_settings_defaults
from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.settings import EngineSettings

SRC_DIR = Path(__file__).resolve().parent.parent / "src"


def _env(tmp_path: Path) -> dict[str, str]:
    env = os.environ.copy()
    env["CHART_ENGINE_OUTPUTS_DIR"] = str(tmp_path / "outputs")
    env["MPLBACKEND"] = "Agg"
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC_DIR), env.get("PYTHONPATH", "")) if p)
    return env


def test_cli_doctor_writes_render_record(tmp_path: Path) -> None:
    env = _env(tmp_path)

    # Run: python -m chart_engine.cli doctor
    result = subprocess.run(
        [sys.executable, "-m", "chart_engine.cli", "doctor"],
        capture_output=True,
        text=True,
        env=env,
    )

    assert result.returncode == 0, result.stderr
    records = list((tmp_path / "outputs" / "renders").glob("*/render_record.json"))
    assert len(records) >= 1, f"No render_record.json found. stdout:\n{result.stdout}"
    record = json.loads(records[0].read_text(encoding="utf-8"))
    assert record["config_hashes"] == {}
    assert record["checks"]["color_scheme_valid"] == "True"
    assert "pastel" in record["checks"]["known_color_schemes"].split(",")


def test_cli_render_writes_png_and_record(tmp_path: Path) -> None:
    csv = tmp_path / "rows.csv"
    csv.write_text("region,sales\nNorth,10\nNorth,20\nSouth,5\n", encoding="utf-8")
    config = tmp_path / "chart.yaml"
    config.write_text(
        "templateId: simple-bar\ntitle: Sales by region\nxAxisField: region\nyAxisField: sales\n",
        encoding="utf-8",
    )
    out_png = tmp_path / "chart.png"

    result = subprocess.run(
        [
            sys.executable,
            "-m",
            "chart_engine.cli",
            "render",
            "--csv",
            str(csv),
            "--config",
            str(config),
            "--out",
            str(out_png),
            "--no-animation",
        ],
        capture_output=True,
        text=True,
        env=_env(tmp_path),
    )

    assert result.returncode == 0, result.stderr
    assert out_png.exists() and out_png.stat().st_size > 0

    (record_path,) = (tmp_path / "outputs" / "renders").glob("*/render_record.json")
    record = json.loads(record_path.read_text(encoding="utf-8"))
    assert record["template_id"] == "simple-bar"
    assert record["row_count"] == 3
    assert not record["used_sample_data"]
    assert set(record["config_hashes"]) == {"chart_configuration", "input_csv"}
    summary = (record_path.parent / "summary.txt").read_text(encoding="utf-8")
    assert "- North: 30" in summary


def test_cli_dispatch(capsys, tmp_path: Path) -> None:
    assert main(["templates"]) == 0
    assert "pie-chart" in capsys.readouterr().out
    assert main(["nope"]) == 2
    assert main([]) == 0
    assert main(["render", "--csv", str(tmp_path / "x.csv"), "--config", str(tmp_path / "missing.yaml")]) == 1


def test_settings_color_scheme_fills_unset_config() -> None:
    settings = EngineSettings(color_scheme="neon")

    unset = ChartConfiguration.model_validate({"templateId": "simple-bar"})
    explicit = ChartConfiguration.model_validate({"templateId": "simple-bar", "colorScheme": "pastel"})

    assert _with_settings_defaults(unset, settings).color_scheme == "neon"
    assert _with_settings_defaults(explicit, settings).color_scheme == "pastel"
