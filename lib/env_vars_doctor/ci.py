"""CI environment detection.

A platform counts as detected when any of its configured indicator
variables is set to a non-empty value in the process environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from .config import DoctorConfig


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def detected_platform(
    config: DoctorConfig, environ: Mapping[str, str] | None = None
) -> str | None:
    """Return the first configured platform whose indicator is set, or None."""
    env = _environ(environ)
    for platform, names in config.ci.detection.items():
        if any(env.get(name) for name in names):
            return platform
    return None


def is_ci(config: DoctorConfig, environ: Mapping[str, str] | None = None) -> bool:
    """Check if running under any configured CI platform."""
    return detected_platform(config, environ) is not None


def should_skip(config: DoctorConfig, environ: Mapping[str, str] | None = None) -> bool:
    """Check if the configured skip variable is set."""
    skip_var = config.ci.skip_env_var
    return bool(skip_var) and bool(_environ(environ).get(skip_var))
