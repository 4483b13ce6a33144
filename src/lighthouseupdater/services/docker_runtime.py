"""Docker runtime services for lighthouseupdater."""

from typing import List, Optional, Protocol, Sequence

from lighthouseupdater.errors import (
    CommandTimeout,
    PullFailure,
    PullTimeout,
    RuntimeClientError,
    UpdaterError,
)
from lighthouseupdater.errors_catalog import actionable_error
from lighthouseupdater.models import Bind
from lighthouseupdater.services.command_runner import CommandRunner


class ContainerRuntime(Protocol):
    """
    The container operations the updater relies on
    """

    def pull_image(self, name: str, tag: str, timeout: Optional[float] = None) -> None:
        pass

    def create_container(self, image: str, binds: Sequence[Bind], cmd: Sequence[str]) -> str:
        pass

    def start_container(self, container_id: str) -> None:
        pass

    def wait_container(self, container_id: str, timeout: Optional[float] = None) -> int:
        pass

    def remove_container(self, container_id: str) -> None:
        pass


class DockerCliRuntime:
    """Drives the docker command line client."""

    COMMAND_TIMEOUT_SECONDS = 60

    def __init__(self, logger, command_runner: CommandRunner, docker_binary: str = "docker"):
        self.logger = logger
        self.command_runner = command_runner
        self.docker_binary = docker_binary

    def _docker(self, *args: str) -> List[str]:
        return [self.docker_binary, *args]

    def validate_environment(self):
        try:
            result = self.command_runner.run(self._docker("--version"), timeout=30)
        except UpdaterError as exc:
            raise RuntimeClientError(
                actionable_error("docker_unavailable", binary=self.docker_binary)
            ) from exc
        self.logger.debug("Docker client: %s", result.stdout.strip())

    def pull_image(self, name: str, tag: str, timeout: Optional[float] = None) -> None:
        image = f"{name}:{tag}"
        try:
            self.command_runner.run(self._docker("pull", image), timeout=timeout)
        except CommandTimeout as exc:
            raise PullTimeout(
                actionable_error("pull_timeout", image=image, seconds=str(timeout))
            ) from exc
        except UpdaterError as exc:
            raise PullFailure(f"{actionable_error('pull_failed', image=image)}\n{exc}") from exc

    def create_container(self, image: str, binds: Sequence[Bind], cmd: Sequence[str]) -> str:
        args = ["create"]
        for bind in binds:
            args.extend(["--volume", bind.as_volume_spec()])
        args.append(image)
        args.extend(cmd)

        result = self.command_runner.run(self._docker(*args), timeout=self.COMMAND_TIMEOUT_SECONDS)
        container_id = result.stdout.strip().splitlines()[-1] if result.stdout.strip() else ""
        if not container_id:
            raise RuntimeClientError(f"Docker did not report an ID for the container created from {image}.")
        return container_id

    def start_container(self, container_id: str) -> None:
        self.command_runner.run(
            self._docker("start", container_id), timeout=self.COMMAND_TIMEOUT_SECONDS
        )

    def wait_container(self, container_id: str, timeout: Optional[float] = None) -> int:
        result = self.command_runner.run(self._docker("wait", container_id), timeout=timeout)
        output = result.stdout.strip()
        try:
            return int(output.splitlines()[-1])
        except (IndexError, ValueError) as exc:
            raise RuntimeClientError(
                f"Unexpected output from docker wait for {container_id}: {output!r}"
            ) from exc

    def remove_container(self, container_id: str) -> None:
        self.command_runner.run(self._docker("rm", container_id), timeout=self.COMMAND_TIMEOUT_SECONDS)
