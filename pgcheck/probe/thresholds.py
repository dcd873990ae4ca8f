"""Parse warning/critical threshold vectors from comma-separated strings."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from pgcheck.core.types import INT64_MAX, INT64_MIN
from pgcheck.probe.exceptions import ConfigurationError

ThresholdVector = tuple[int, ...]

DEFAULT_WARNING: ThresholdVector = (1,)
DEFAULT_CRITICAL: ThresholdVector = (2,)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class Thresholds(BaseModel):
    """Equal-length warning and critical vectors, aligned to result columns."""

    model_config = ConfigDict(frozen=True)

    warning: ThresholdVector
    critical: ThresholdVector

    @property
    def width(self) -> int:
        return len(self.warning)


def _parse_token(token: str) -> int:
    if not _INTEGER_RE.fullmatch(token):
        raise ConfigurationError(f"Invalid integer in threshold list: '{token}'")
    digits = token.lstrip("+-").lstrip("0")
    value = int(token) if len(digits) <= 19 else INT64_MAX + 1
    if not INT64_MIN <= value <= INT64_MAX:
        raise ConfigurationError(f"Threshold out of 64-bit range: '{token}'")
    return value


def parse_vector(text: str | None, default: ThresholdVector) -> ThresholdVector:
    """Parse ``n1[,n2...]``; ``None`` yields *default*.

    Tokens are a sign and ASCII digits only, no surrounding whitespace.
    """
    if text is None:
        return default
    return tuple(_parse_token(token) for token in text.split(","))


def parse_thresholds(warning: str | None, critical: str | None) -> Thresholds:
    """Build both vectors and verify they have the same length.

    Raises:
        ConfigurationError: A token is not an integer or the lengths differ.
    """
    warn_vec = parse_vector(warning, DEFAULT_WARNING)
    crit_vec = parse_vector(critical, DEFAULT_CRITICAL)
    if len(warn_vec) != len(crit_vec):
        raise ConfigurationError("Size of integer arrays need to match")
    return Thresholds(warning=warn_vec, critical=crit_vec)
