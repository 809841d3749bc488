"""Reverse geocoding result model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LookupResult(BaseModel):
    """Subset of a Nominatim ``/reverse`` response.

    Parameters
    ----------
    name : str
        Short name of the feature (e.g. a street or POI), may be empty.
    display_name : str
        Full comma separated address.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = ""
    display_name: str = Field(default="", validation_alias=AliasChoices("display_name", "displayName"))

    @field_validator("name", "display_name", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @property
    def best_name(self) -> str:
        """``name`` when present, otherwise ``display_name``."""
        return self.name or self.display_name
