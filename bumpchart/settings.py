"""Chart settings.

All tunables live in one pydantic model so host applications can override
them from the environment (``BUMPCHART_<FIELD>``) without touching code.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "BUMPCHART_"

# Tableau 10
DEFAULT_COLORS = [
    "#4e79a7", "#f28e2c", "#e15759", "#76b7b2", "#59a14f",
    "#edc949", "#af7aa1", "#ff9da7", "#9c755f", "#bab0ab",
]


class Margin(BaseModel):
    top: int = Field(default=20, ge=0)
    right: int = Field(default=30, ge=0)
    bottom: int = Field(default=40, ge=0)
    left: int = Field(default=30, ge=0)

    model_config = ConfigDict(extra="forbid")


class ChartSettings(BaseModel):
    max_reported_errors: int = Field(default=200, ge=1)
    debounce_seconds: float = Field(default=0.3, ge=0)
    layer_height_px: int = Field(default=20, ge=1)
    min_width_px: int = Field(default=1000, ge=1)
    label_offset_px: int = Field(default=5, ge=0)
    margin: Margin = Field(default_factory=Margin)
    palette: list[str] = Field(default_factory=lambda: list(DEFAULT_COLORS), min_length=1)
    log_level: str = "INFO"

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ChartSettings":
        """Build settings from ``BUMPCHART_*`` variables.

        ``BUMPCHART_PALETTE`` is a comma separated colour list; nested margin
        values use ``BUMPCHART_MARGIN_TOP`` and friends.
        """
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        margin: dict[str, Any] = {}
        for name, value in env.items():
            if not name.startswith(ENV_PREFIX):
                continue
            key = name[len(ENV_PREFIX):].lower()
            if key.startswith("margin_"):
                margin[key[len("margin_"):]] = value
            elif key == "palette":
                data[key] = [c.strip() for c in value.split(",") if c.strip()]
            else:
                data[key] = value
        if margin:
            data["margin"] = margin
        return cls.model_validate(data)


def configure_logging(settings: ChartSettings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
