"""
Config check use case — load ~/.gh-shorthand.yml and report problems.

Errors make the config unusable. Warnings flag things that load fine but
probably are not what the user meant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from shorthand.core.config.loader import ConfigError, default_config_path, load_config
from shorthand.core.models.config import ShorthandConfig


@dataclass
class ConfigCheckResult:
    """Outcome of ``check_config``."""

    config_path: Path
    config: ShorthandConfig | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.config is not None and not self.errors

    def to_dict(self) -> dict:
        cfg = self.config or ShorthandConfig()
        return {
            "valid": self.valid,
            "config_path": str(self.config_path),
            "errors": self.errors,
            "warnings": self.warnings,
            "repo_count": len(cfg.repos),
            "user_count": len(cfg.users),
            "default_repo": cfg.default_repo or None,
            "rpc_enabled": cfg.rpc_enabled,
        }


def _warnings_for(config: ShorthandConfig) -> list[str]:
    warnings = [
        f"'{key}' is both a repo ({config.repos[key]}) and a user ({config.users[key]}): "
        f"'{key}' alone opens the repo, '{key}/...' uses the user."
        for key in config.shorthand_collisions()
    ]
    if not (config.repos or config.users or config.default_repo):
        warnings.append("No repo or user shorthands defined.")
    if not config.api_token:
        warnings.append("No api_token set; live GitHub details are disabled.")
    return warnings


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the shorthand configuration.

    Args:
        config_path: Config file; :func:`default_config_path` when None.
    """
    result = ConfigCheckResult(config_path=config_path or default_config_path())

    try:
        result.config = load_config(result.config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.warnings.extend(_warnings_for(result.config))
    return result
