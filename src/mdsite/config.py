"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:      str = "mdsite"
    db_url:        str = "sqlite:///mdsite.db"
    content_dir:   str = Field(default="content",  description="Root directory of markdown pages and posts")
    output_dir:    str = Field(default="public",   description="Directory for exported pages + index.json")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    data_dir:      str = Field(default="data",     description="Root directory for dataset partitions")
    dataset_name:  str = Field(default="market_tracker", pattern=r"^[A-Za-z0-9_\-]+$")
    symbols:       str = Field(default="AAPL,MSFT,TSLA", description="Comma-separated keys fetched per run")
    source_url:    str = Field(default="https://www.alphavantage.co/query", description="Quote API endpoint")
    api_key:       str = Field(default="demo", description="Quote API key")
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")

    @property
    def symbol_list(self) -> list[str]:
        return [s.strip().upper() for s in self.symbols.split(",") if s.strip()]


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
