from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from ..core.exporter import output_filename


class MeshConfig(BaseModel):
    max_neighbors: int = Field(12, ge=1)
    max_points: Optional[int] = Field(None, ge=3)


class OutputConfig(BaseModel):
    format: Literal["obj", "ply", "stl"] = "stl"
    path: Optional[Path] = None
    date_stamp: bool = False

    @model_validator(mode="after")
    def _validate_suffix(self) -> "OutputConfig":
        if self.path is not None:
            output_filename(self.path, self.format)
        return self


class PipelineConfig(BaseModel):
    input: Path
    mesh: MeshConfig = MeshConfig()
    output: OutputConfig = OutputConfig()
    log_level: str = "INFO"


def load_config(path: str | Path) -> PipelineConfig:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError("Configuration root must be a mapping.")
    cfg = PipelineConfig.model_validate(data)
    if not cfg.input.is_absolute():
        cfg.input = (path.parent / cfg.input).resolve()
    if cfg.output.path is None:
        cfg.output.path = path.parent.resolve()
    elif not cfg.output.path.is_absolute():
        cfg.output.path = (path.parent / cfg.output.path).resolve()
    return cfg
