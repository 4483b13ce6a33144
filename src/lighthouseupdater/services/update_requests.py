"""Loads already-resolved container update requests from YAML."""

from pathlib import Path
from typing import Any, List

import yaml

from lighthouseupdater.errors import ConfigurationError
from lighthouseupdater.models import ContainerUpdate, ImageUpdate


class UpdateRequestLoader:
    """Reads a YAML list of ``{image, tag, names, source_images}`` entries."""

    REQUIRED_KEYS = ("image", "tag", "names")

    def load(self, updates_path: str) -> List[ContainerUpdate]:
        path = Path(updates_path)
        if not path.exists():
            raise ConfigurationError(f"Updates file not found: {updates_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid updates file '{updates_path}': {exc}") from exc

        if parsed is None:
            return []
        if not isinstance(parsed, list):
            raise ConfigurationError("Updates file must contain a YAML list at the root.")

        return [self.parse_entry(index, entry) for index, entry in enumerate(parsed)]

    def parse_entry(self, index: int, entry: Any) -> ContainerUpdate:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Update #{index} must be a mapping.")

        missing = [key for key in self.REQUIRED_KEYS if not entry.get(key)]
        if missing:
            raise ConfigurationError(f"Update #{index} is missing: {', '.join(missing)}")

        for key in ("image", "tag"):
            if not isinstance(entry[key], str):
                raise ConfigurationError(f"Update #{index}: `{key}` must be a quoted string.")

        names = self._string_list(index, "names", entry["names"])
        source_images = self._string_list(index, "source_images", entry.get("source_images") or [])

        image_update = ImageUpdate(
            name=entry["image"],
            tag=entry["tag"],
            source_image_names=tuple(source_images),
        )
        return ContainerUpdate(image_update=image_update, names=tuple(names))

    @staticmethod
    def _string_list(index: int, key: str, value: Any) -> List[str]:
        if isinstance(value, str):
            return [value]
        if isinstance(value, list) and all(isinstance(item, str) and item for item in value):
            return list(value)
        raise ConfigurationError(f"Update #{index}: `{key}` must be a string or a list of strings.")
