"""Shared domain models for lighthouseupdater."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from lighthouseupdater.errors import ConfigurationError


@dataclass(frozen=True)
class ImageUpdate:
    """A base image to refresh. Equal when name and tag match."""

    name: str
    tag: str
    source_image_names: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def name_with_tag(self) -> str:
        return f"{self.name}:{self.tag}"


@dataclass(frozen=True)
class ContainerUpdate:
    """Containers to recreate once their base image has been refreshed."""

    image_update: ImageUpdate
    names: Tuple[str, ...]

    def __post_init__(self):
        names = (self.names,) if isinstance(self.names, str) else tuple(self.names)
        if not names:
            raise ConfigurationError(
                f"Container update for {self.image_update.name_with_tag} names no containers."
            )
        object.__setattr__(self, "names", names)


@dataclass(frozen=True)
class Bind:
    source: str
    destination: str

    def as_volume_spec(self) -> str:
        return f"{self.source}:{self.destination}"


class RebuildState(str, Enum):
    IDLE = "idle"
    PULLING_IMAGES = "pulling_images"
    CREATING_UPDATER = "creating_updater"
    STARTING = "starting"
    WAITING = "waiting"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


@dataclass
class RebuildReport:
    """Outcome of one orchestration pass."""

    container_id: Optional[str] = None
    command: List[str] = field(default_factory=list)
    pulled_images: List[ImageUpdate] = field(default_factory=list)
    failed_pulls: Dict[str, str] = field(default_factory=dict)
    exit_code: Optional[int] = None
    state: RebuildState = RebuildState.IDLE

    @property
    def succeeded(self) -> bool:
        return self.state == RebuildState.COMPLETED

    @property
    def exit_ok(self) -> bool:
        return self.exit_code in (None, 0)
