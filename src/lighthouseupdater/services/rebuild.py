"""Container rebuild orchestration for lighthouseupdater."""

import time
from typing import Iterable, List, Optional, Sequence

from lighthouseupdater.errors import (
    PullFailure,
    RebuildTimeout,
    TransientRuntimeError,
    UpdaterError,
)
from lighthouseupdater.errors_catalog import actionable_error
from lighthouseupdater.models import ContainerUpdate, ImageUpdate, RebuildReport, RebuildState
from lighthouseupdater.services.image_updater import ImageUpdaterService
from lighthouseupdater.services.mounts import parse_mounts


class RebuildService:
    """Pulls new base images and delegates recreation to an updater container.

    The updater container receives ``[entrypoint, name1, name2, ...]`` as its
    command and is expected to recreate every named container. Waiting for it
    is bounded by an absolute deadline; transient runtime errors while waiting
    are retried until that deadline passes.
    """

    WAIT_DEADLINE_SECONDS = 10 * 60
    WAIT_ATTEMPT_TIMEOUT_SECONDS = 5 * 60
    RETRY_BACKOFF_SECONDS = 2.0

    def __init__(
        self,
        logger,
        runtime,
        updater_mounts: Iterable[str],
        updater_entrypoint: str,
        updater_image: str,
        image_updater: Optional[ImageUpdaterService] = None,
        wait_deadline_seconds: float = WAIT_DEADLINE_SECONDS,
        wait_attempt_timeout_seconds: float = WAIT_ATTEMPT_TIMEOUT_SECONDS,
        retry_backoff_seconds: float = RETRY_BACKOFF_SECONDS,
    ):
        self.logger = logger
        self.runtime = runtime
        self.binds = parse_mounts(updater_mounts)
        self.updater_entrypoint = updater_entrypoint
        self.updater_image = updater_image
        self.image_updater = image_updater or ImageUpdaterService(logger=logger, runtime=runtime)
        self.wait_deadline_seconds = wait_deadline_seconds
        self.wait_attempt_timeout_seconds = wait_attempt_timeout_seconds
        self.retry_backoff_seconds = retry_backoff_seconds

    @staticmethod
    def collect_image_updates(updates: Sequence[ContainerUpdate]) -> List[ImageUpdate]:
        return list(dict.fromkeys(update.image_update for update in updates))

    @staticmethod
    def collect_container_names(updates: Sequence[ContainerUpdate]) -> List[str]:
        return list(dict.fromkeys(name for update in updates for name in update.names))

    def build_command(self, updates: Sequence[ContainerUpdate]) -> List[str]:
        return [self.updater_entrypoint, *self.collect_container_names(updates)]

    def _transition(self, report: RebuildReport, state: RebuildState):
        self.logger.debug("Rebuild state: %s -> %s", report.state.value, state.value)
        report.state = state

    def pull_images(self, updates: Sequence[ContainerUpdate], report: RebuildReport):
        for image_update in self.collect_image_updates(updates):
            try:
                self.image_updater.update_base_image(image_update)
            except PullFailure as exc:
                self.logger.warning("Could not update base image %s: %s", image_update.name_with_tag, exc)
                report.failed_pulls[image_update.name_with_tag] = str(exc)
                continue
            report.pulled_images.append(image_update)

    def rebuild_containers(self, updates: Sequence[ContainerUpdate]) -> RebuildReport:
        report = RebuildReport()
        if not updates:
            self.logger.info("No containers to rebuild.")
            self._transition(report, RebuildState.COMPLETED)
            return report

        self.logger.info("Rebuilding %s containers", len(updates))
        self._transition(report, RebuildState.PULLING_IMAGES)
        self.pull_images(updates, report)

        report.command = self.build_command(updates)
        self._transition(report, RebuildState.CREATING_UPDATER)
        container_id = self.runtime.create_container(self.updater_image, self.binds, report.command)
        report.container_id = container_id
        self.logger.info("Started updater has ID %s", container_id)

        self._transition(report, RebuildState.STARTING)
        deadline = time.monotonic() + self.wait_deadline_seconds
        try:
            self.runtime.start_container(container_id)
        except UpdaterError:
            self.logger.warning(
                "Updater container %s was created but could not be started; remove it manually.",
                container_id,
            )
            raise

        self._transition(report, RebuildState.WAITING)
        exit_code = self.await_exit(container_id, deadline)
        if exit_code is None:
            self._transition(report, RebuildState.TIMED_OUT)
            raise RebuildTimeout(
                actionable_error(
                    "rebuild_timeout",
                    container_id=container_id,
                    seconds=f"{self.wait_deadline_seconds:g}",
                ),
                container_id=container_id,
            )

        report.exit_code = exit_code
        if exit_code != 0:
            self.logger.warning("Rebuild failed with exit code %s", exit_code)

        self.remove_updater(container_id, deadline)
        self._transition(report, RebuildState.COMPLETED)
        return report

    def await_exit(self, container_id: str, deadline: float) -> Optional[int]:
        """Waits for the container's exit code until ``deadline`` (monotonic seconds).

        Returns ``None`` when the deadline passes without an exit code.
        """
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None

            try:
                return self.runtime.wait_container(
                    container_id,
                    timeout=min(self.wait_attempt_timeout_seconds, remaining),
                )
            except TransientRuntimeError as exc:
                self.logger.debug("Waiting for updater %s failed, retrying: %s", container_id, exc)

            remaining = deadline - time.monotonic()
            if remaining > 0:
                time.sleep(min(self.retry_backoff_seconds, remaining))

    def remove_updater(self, container_id: str, deadline: float):
        """Removes the exited updater, retrying transient errors until ``deadline``."""
        while True:
            try:
                self.runtime.remove_container(container_id)
                return
            except TransientRuntimeError as exc:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self.logger.warning("Could not remove updater container %s: %s", container_id, exc)
                    return
                self.logger.debug("Removing updater %s failed, retrying: %s", container_id, exc)
                time.sleep(min(self.retry_backoff_seconds, remaining))
