"""Configuration loader for lighthouseupdater."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from lighthouseupdater.errors import ConfigurationError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "updater_mounts",
        "updater_entrypoint",
        "updater_image",
        "updates_file",
        "docker_binary",
        "verbose",
        "log_file",
        "dry_run",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(f"Unknown configuration keys: {unknown_list}")

        mounts = parsed.get("updater_mounts")
        if mounts is not None and (
            not isinstance(mounts, list) or not all(isinstance(item, str) for item in mounts)
        ):
            raise ConfigurationError("`updater_mounts` must be a list of 'source:dest' strings.")

        return parsed
