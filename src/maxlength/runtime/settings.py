"""Process-level defaults using pydantic-settings."""

from typing import Literal

from pydantic_settings import BaseSettings


class MaxLengthSettings(BaseSettings):
    """Defaults for number fields, overridable via MAXLENGTH_* env vars."""

    model_config = {"env_prefix": "MAXLENGTH_"}

    number_format: Literal["ISO", "EN", "ES"] = "ISO"
    highlight_color: str = "#FF0000"
    horizontal_align: Literal["left", "center", "right", "inherit"] = "right"
