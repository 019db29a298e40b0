from __future__ import annotations

import json
import platform
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_render_id(prefix: str = "render") -> str:
    # Example: render_20260130T120501Z
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"{prefix}_{ts}"


def get_python_version() -> str:
    return platform.python_version()


class RenderRecord(BaseModel):
    """What a CLI render produced and which inputs it was built from."""

    render_id: str
    timestamp: str = Field(default_factory=utc_now_iso)
    template_id: str | None = None
    chart_kind: str | None = None

    input_path: str | None = None
    used_sample_data: bool = False
    row_count: int = 0
    width: int | None = None
    height: int | None = None

    python_version: str = Field(default_factory=get_python_version)

    config_hashes: dict[str, str] = Field(default_factory=dict)
    artifacts: dict[str, str] = Field(default_factory=dict)
    checks: dict[str, str] = Field(default_factory=dict)


def ensure_render_dir(base_outputs_dir: Path, render_id: str) -> Path:
    render_dir = base_outputs_dir / "renders" / render_id
    render_dir.mkdir(parents=True, exist_ok=True)
    return render_dir


def write_render_record(render_dir: Path, record: RenderRecord) -> Path:
    path = render_dir / "render_record.json"
    path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
    return path


def read_render_record(path: Path) -> RenderRecord:
    data = json.loads(path.read_text(encoding="utf-8"))
    return RenderRecord.model_validate(data)
