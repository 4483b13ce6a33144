"""Domain errors for lighthouseupdater."""


class UpdaterError(RuntimeError):
    """Raised when an update cannot continue safely."""


class ConfigurationError(UpdaterError):
    """Raised for malformed mounts, config files or update requests."""


class PullFailure(UpdaterError):
    """Raised when a base image could not be pulled."""


class PullTimeout(PullFailure):
    """Raised when a base image pull exceeded its time ceiling."""


class RuntimeClientError(UpdaterError):
    """Raised when the container runtime rejects a command."""


class TransientRuntimeError(RuntimeClientError):
    """Raised for runtime failures that are worth retrying."""


class RebuildTimeout(UpdaterError):
    """Raised when the updater container did not finish before the deadline."""

    def __init__(self, message: str, container_id: str):
        super().__init__(message)
        self.container_id = container_id


class CommandTimeout(TransientRuntimeError):
    """Raised when a runtime command outlived its timeout."""
