"""Bind mount parsing for the updater container."""

from typing import Iterable, List

from lighthouseupdater.errors import ConfigurationError
from lighthouseupdater.errors_catalog import actionable_error
from lighthouseupdater.models import Bind


def parse_mount(mount: str) -> Bind:
    parts = mount.split(":")
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(actionable_error("invalid_mount", mount=mount))
    return Bind(source=parts[0], destination=parts[1])


def parse_mounts(raw_mounts: Iterable[str]) -> List[Bind]:
    """Turns ``source:dest`` strings into binds, keeping their order."""
    return [parse_mount(mount) for mount in raw_mounts]
