from __future__ import annotations

from pathlib import Path

import pytest

from chart_engine.core.errors import ConfigError, DataSourceError
from chart_engine.core.run_record import (
    RenderRecord,
    ensure_render_dir,
    generate_render_id,
    read_render_record,
    write_render_record,
)
from chart_engine.core.settings import load_settings
from chart_engine.core.utils_hash import sha256_file, sha256_payload, sha256_text


def test_render_record_round_trip(tmp_path: Path) -> None:
    render_id = generate_render_id()
    render_dir = ensure_render_dir(tmp_path, render_id)
    record = RenderRecord(render_id=render_id, template_id="pie-chart", row_count=3)
    record.config_hashes["chart_configuration"] = "abc"

    path = write_render_record(render_dir, record)
    loaded = read_render_record(path)

    assert path == tmp_path / "renders" / render_id / "render_record.json"
    assert loaded.template_id == "pie-chart"
    assert loaded.config_hashes == {"chart_configuration": "abc"}


def test_settings_from_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CHART_ENGINE_WIDTH", "900")
    monkeypatch.setenv("CHART_ENGINE_OUTPUTS_DIR", str(tmp_path))
    settings = load_settings(str(tmp_path / "absent.env"))

    assert settings.width == 900
    assert settings.height == 400
    assert settings.outputs_dir == tmp_path


def test_invalid_settings_raise_config_error(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CHART_ENGINE_WIDTH", "-5")
    with pytest.raises(ConfigError):
        load_settings(str(tmp_path / "absent.env"))


def test_payload_hash_ignores_key_order(tmp_path: Path) -> None:
    assert sha256_payload({"a": 1, "b": [1, 2]}) == sha256_payload({"b": [1, 2], "a": 1})
    assert sha256_payload({"a": 1}) != sha256_payload({"a": 2})

    csv = tmp_path / "rows.csv"
    csv.write_text("region,sales\n", encoding="utf-8")
    assert sha256_file(csv) == sha256_text("region,sales\n")
    with pytest.raises(DataSourceError):
        sha256_file(tmp_path / "missing.csv")
