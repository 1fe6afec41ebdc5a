"""
Stemmer configuration from environment variables.

Config (env vars):
    TRMORPH_LOOKUP_COMMAND: analyzer command, e.g. "flookup -b /opt/trmorph/stem.fst"
        (required unless TRMORPH_OVERRIDE_FILE is set)
    TRMORPH_AGGREGATION: "max" | "min" (default: max)
    TRMORPH_OVERRIDE_FILE: path to a word<TAB>stem override dictionary (optional)
    TRMORPH_OVERRIDE_IGNORE_CASE: "true" to match overrides case-insensitively
    TRMORPH_ANALYZER_TIMEOUT: seconds per analyzer call (default: 5)

Environment files (.env.local / .env) are loaded by the entry points
(src/main.py, scripts/) before load_settings() is called.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .aggregator import AggregationPolicy
from .errors import UnknownAggregationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StemmerSettings:
    lookup_command: Optional[str]
    aggregation: AggregationPolicy = AggregationPolicy.MAX
    override_file: Optional[str] = None
    override_ignore_case: bool = False
    analyzer_timeout: float = 5.0


def parse_aggregation(value: str) -> AggregationPolicy:
    """Validate an aggregation policy name (case-insensitive)."""
    try:
        return AggregationPolicy(value.strip().lower())
    except ValueError:
        raise UnknownAggregationError(value) from None


def load_settings() -> StemmerSettings:
    """
    Read stemmer settings from the environment.

    Raises:
        ValueError: missing analyzer command (and no override file),
            bad aggregation name or non-numeric timeout
    """
    lookup_command = os.getenv("TRMORPH_LOOKUP_COMMAND") or None
    override_file = os.getenv("TRMORPH_OVERRIDE_FILE") or None

    if lookup_command is None and override_file is None:
        raise ValueError(
            "TRMORPH_LOOKUP_COMMAND environment variable is required "
            "when TRMORPH_OVERRIDE_FILE is not set"
        )

    aggregation = parse_aggregation(os.getenv("TRMORPH_AGGREGATION", "max"))
    ignore_case = os.getenv("TRMORPH_OVERRIDE_IGNORE_CASE", "false").lower() == "true"

    timeout_value = os.getenv("TRMORPH_ANALYZER_TIMEOUT", "5")
    try:
        timeout = float(timeout_value)
    except ValueError:
        raise ValueError(f"TRMORPH_ANALYZER_TIMEOUT must be a number, got {timeout_value!r}") from None
    if timeout <= 0:
        raise ValueError(f"TRMORPH_ANALYZER_TIMEOUT must be positive, got {timeout}")

    settings = StemmerSettings(
        lookup_command=lookup_command,
        aggregation=aggregation,
        override_file=override_file,
        override_ignore_case=ignore_case,
        analyzer_timeout=timeout,
    )
    logger.info(
        f"Stemmer config: aggregation={aggregation.value}, "
        f"override_file={override_file}, lookup_command={lookup_command}"
    )
    return settings
