"""Settings loading with deterministic precedence.

The cascade is always:
1) Init params (``cli_params``)
2) Environment variables
3) ~/.config/netdispatch/netdispatch.yaml
4) Model defaults

Environment variable format:
- Prefix: ``NETDISPATCH_``
- Nested keys: ``__`` separator
- Example: ``NETDISPATCH_CLIENT__BASE_URL=https://api.example.com``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Mapping

from .models import DEFAULT_CONFIG_PATH, NetDispatchSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> NetDispatchSettings:
    """Resolve settings from init params, env, and an optional YAML file."""
    resolved = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    class _ResolvedSettings(NetDispatchSettings):
        _config_path: ClassVar[Path] = resolved

    return _ResolvedSettings(**dict(cli_params or {}))
