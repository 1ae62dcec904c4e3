"""
Extractor configuration.

Defaults can be overridden per instance, from environment variables via
ExtractorConfig.from_env(), or from command-line flags (see main.py).
"""

import os
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

import pytz

FALLBACK_SCOPES = ("course", "batch")


@dataclass
class ExtractorConfig:
    """Settings shared by the parser, cascade and normalizer."""
    timezone: str = "UTC"                   # Zone for "local noon" and naive times (pytz name)
    reference_date: Optional[date] = None   # Anchor for year-less dates and the Tier 2 window; None = today
    year_window: int = 2                    # Tier 2 keeps dates within +/- this many years
    context_radius: int = 50                # Characters captured on each side of a Tier 2 match
    min_text_length: int = 10               # Shorter text counts as "no content"
    description_limit: int = 200
    raw_text_limit: int = 500
    use_enhanced_parser: bool = False       # Put the dateparser grammar at the head of the chain
    fallback_scope: str = "course"          # "course" or "batch"

    def __post_init__(self):
        if self.fallback_scope not in FALLBACK_SCOPES:
            raise ValueError(
                f"fallback_scope must be one of {FALLBACK_SCOPES}, got {self.fallback_scope!r}"
            )
        try:
            pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"unknown timezone {self.timezone!r}") from exc

    @property
    def today(self) -> date:
        return self.reference_date or date.today()

    @property
    def reference_year(self) -> int:
        return self.today.year

    def with_overrides(self, **changes) -> "ExtractorConfig":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ=None) -> "ExtractorConfig":
        """Build a config from IMPORTANT_DATES_* environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            ExtractorConfig with unset variables left at their defaults
        """
        env = os.environ if environ is None else environ
        settings = {}
        if env.get("IMPORTANT_DATES_TIMEZONE"):
            settings["timezone"] = env["IMPORTANT_DATES_TIMEZONE"].strip()
        if env.get("IMPORTANT_DATES_YEAR_WINDOW"):
            settings["year_window"] = int(env["IMPORTANT_DATES_YEAR_WINDOW"])
        if env.get("IMPORTANT_DATES_ENHANCED_PARSER"):
            settings["use_enhanced_parser"] = env["IMPORTANT_DATES_ENHANCED_PARSER"].strip().lower() in (
                "1", "true", "yes", "on"
            )
        if env.get("IMPORTANT_DATES_FALLBACK_SCOPE"):
            settings["fallback_scope"] = env["IMPORTANT_DATES_FALLBACK_SCOPE"].strip().lower()
        return cls(**settings)
