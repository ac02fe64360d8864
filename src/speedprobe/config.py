from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    DEFAULT_SIZE,
    ENV_DEFAULT_SIZE,
    ENV_MAX_DOWNLOAD,
    ENV_MAX_UPLOAD,
    MAX_DOWNLOAD,
    MAX_UPLOAD,
)

# optional sign and leading ASCII digits; trailing junk is ignored ("12abc" -> 12)
_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Parse the leading base-10 integer of ``raw``, or None when there is none."""
    if raw is None:
        return None
    m = _LEADING_INT.match(raw)
    if m is None:
        return None
    sign, digits = m.groups()
    digits = digits.lstrip("0") or "0"
    # past float range the value is not finite and counts as unparsable
    if len(digits) > 309 or math.isinf(float(digits)):
        return None
    n = int(digits)
    return -n if sign == "-" else n


def positive_or(raw: Optional[str], fallback: int) -> int:
    n = parse_int(raw)
    if n is None or n <= 0:
        return fallback
    return n


def env_int(name: str, fallback: int, environ: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if environ is None else environ
    return positive_or(env.get(name), fallback)


@dataclass(frozen=True, slots=True)
class SizeConfig:
    default_size: int = DEFAULT_SIZE
    max_download: int = MAX_DOWNLOAD
    max_upload: int = MAX_UPLOAD

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SizeConfig":
        return cls(
            default_size=env_int(ENV_DEFAULT_SIZE, DEFAULT_SIZE, environ),
            max_download=env_int(ENV_MAX_DOWNLOAD, MAX_DOWNLOAD, environ),
            max_upload=env_int(ENV_MAX_UPLOAD, MAX_UPLOAD, environ),
        )


def resolve_download_size(raw: Optional[str], config: SizeConfig) -> int:
    """Effective download size for a caller-supplied ``size`` hint.

    Missing, non-numeric, zero and negative hints fall back to the configured
    default; the result is then clamped down to the configured maximum.
    """
    size = positive_or(raw, config.default_size)
    return min(size, config.max_download)
