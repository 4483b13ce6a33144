import logging
from typing import Iterable, Optional, Sequence

from rich.console import Console

from .errors import ConfigurationError, RebuildTimeout, UpdaterError
from .models import ContainerUpdate, ImageUpdate, RebuildReport
from .services.command_runner import CommandRunner
from .services.docker_runtime import ContainerRuntime, DockerCliRuntime
from .services.image_updater import ImageUpdaterService
from .services.rebuild import RebuildService

console = Console()
logger = logging.getLogger("lighthouseupdater")


class LighthouseUpdater:
    def __init__(
        self,
        updater_mounts: Iterable[str],
        updater_entrypoint: str,
        updater_image: str,
        docker_binary: str = "docker",
        dry_run: bool = False,
        runtime: Optional[ContainerRuntime] = None,
    ):
        if not updater_entrypoint:
            raise ConfigurationError("An updater entrypoint is required.")
        if not updater_image:
            raise ConfigurationError("An updater image is required.")

        self.dry_run = dry_run
        self.command_runner = CommandRunner(logger=logger)
        self.runtime = runtime or DockerCliRuntime(
            logger=logger,
            command_runner=self.command_runner,
            docker_binary=docker_binary,
        )
        self.image_updater_service = ImageUpdaterService(logger=logger, runtime=self.runtime)
        # Mounts are parsed here so a malformed one fails before any docker call.
        self.rebuild_service = RebuildService(
            logger=logger,
            runtime=self.runtime,
            updater_mounts=updater_mounts,
            updater_entrypoint=updater_entrypoint,
            updater_image=updater_image,
            image_updater=self.image_updater_service,
        )

    def update_base_image(self, update: ImageUpdate):
        self.image_updater_service.update_base_image(update)

    def rebuild_containers(self, updates: Sequence[ContainerUpdate]) -> RebuildReport:
        return self.rebuild_service.rebuild_containers(updates)

    def pull_images(self, updates: Sequence[ContainerUpdate]) -> RebuildReport:
        report = RebuildReport()
        self.rebuild_service.pull_images(updates, report)
        return report

    def validate_environment(self):
        validate = getattr(self.runtime, "validate_environment", None)
        if validate is not None:
            console.print("[blue]Validating Docker environment...[/blue]")
            validate()
            console.print("[green]Docker is available.[/green]")

    def print_plan(self, updates: Sequence[ContainerUpdate]):
        console.print("[bold blue]Dry run: no Docker commands will be executed.[/bold blue]")
        for image_update in self.rebuild_service.collect_image_updates(updates):
            console.print(f"Pull [cyan]{image_update.name_with_tag}[/cyan]")
        if updates:
            binds = ", ".join(bind.as_volume_spec() for bind in self.rebuild_service.binds)
            console.print(f"Updater image: [cyan]{self.rebuild_service.updater_image}[/cyan]")
            console.print(f"Updater mounts: {binds or '<none>'}")
            console.print(f"Updater command: {' '.join(self.rebuild_service.build_command(updates))}")

    def _print_report(self, report: RebuildReport):
        for image, error in report.failed_pulls.items():
            console.print(f"[yellow]Pull failed for {image}; cached image will be used.[/yellow]")
            logger.debug("Pull failure for %s: %s", image, error)
        if report.exit_code is not None and not report.exit_ok:
            console.print(
                f"[yellow]Updater container exited with code {report.exit_code}.[/yellow]"
            )
        elif report.container_id:
            console.print("[green]Containers rebuilt.[/green]")

    def run(self, updates: Sequence[ContainerUpdate], pull_only: bool = False) -> int:
        try:
            logger.info("Starting lighthouse updater...")

            if self.dry_run:
                self.print_plan(updates)
                return 0

            self.validate_environment()

            if pull_only:
                report = self.pull_images(updates)
            else:
                report = self.rebuild_containers(updates)
            self._print_report(report)
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except RebuildTimeout as exc:
            console.print(f"[bold red]Timed out:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except UpdaterError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1
