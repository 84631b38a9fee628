"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, inmask.toml only contains
overrides.  A project with no config file gets US locale conventions and
the built-in mask presets.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from inmask.domain.locale import LocaleFormat
from inmask.domain.types import DateOrder, MaskKind

# --- inmask.toml sections ---


class LocaleConfig(BaseModel):
    """[locale] section."""

    model_config = {"frozen": True}

    date_order: DateOrder = DateOrder.MDY
    date_separator: str = Field(default="/", min_length=1, max_length=1)
    decimal_separator: str = Field(default=".", min_length=1, max_length=1)
    group_separator: str = Field(default=",", min_length=1, max_length=1)

    def to_locale(self) -> LocaleFormat:
        """Snapshot this section as a LocaleProvider."""
        return LocaleFormat(
            date_order=self.date_order,
            date_sep=self.date_separator,
            decimal_sep=self.decimal_separator,
            group_sep=self.group_separator,
        )


class MaskPreset(BaseModel):
    """[masks.<name>] section: a named, reusable mask."""

    model_config = {"frozen": True, "extra": "forbid"}

    kind: MaskKind
    template: str = ""
    max_digits: int = 0
    max_decimals: int = 0
    allow_negative: bool = False
    classes: dict[str, str] = Field(default_factory=dict)
    description: str = ""


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".inmask/plugins"


BUILTIN_PRESETS: dict[str, MaskPreset] = {
    "phone": MaskPreset(
        kind=MaskKind.CUSTOM,
        template="(000) 000-0000",
        description="North American phone number",
    ),
    "date": MaskPreset(kind=MaskKind.DATE, description="Date in the configured locale order"),
    "time": MaskPreset(kind=MaskKind.CUSTOM, template="00:00", description="Hours and minutes"),
    "integer": MaskPreset(kind=MaskKind.INTEGER, max_digits=9, description="Whole number"),
    "money": MaskPreset(
        kind=MaskKind.DECIMAL,
        max_digits=12,
        max_decimals=2,
        allow_negative=True,
        description="Signed amount with two decimals",
    ),
}
