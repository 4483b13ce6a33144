import logging
import os

import click
from rich.logging import RichHandler

from .core import LighthouseUpdater, UpdaterError
from .services.config_loader import ConfigLoader
from .services.update_requests import UpdateRequestLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .lighthouseupdater.yml if present.",
)
@click.option(
    "--updates",
    required=False,
    type=click.Path(),
    help="YAML file listing the resolved container updates (image, tag, names).",
)
@click.option(
    "--mount",
    "mounts",
    multiple=True,
    help="Bind mount for the updater container in 'source:dest' format. Repeatable.",
)
@click.option("--entrypoint", required=False, help="Entrypoint executed inside the updater container")
@click.option("--updater-image", required=False, help="Image used to run the updater container")
@click.option(
    "--docker-binary",
    required=False,
    default=None,
    help="Docker client executable (default: docker)",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Print the pulls and updater command without running Docker.",
)
@click.option(
    "--pull-only",
    is_flag=True,
    default=False,
    help="Pull the new base images and skip the rebuild.",
)
def main(
    config,
    updates,
    mounts,
    entrypoint,
    updater_image,
    docker_binary,
    verbose,
    log_file,
    dry_run,
    pull_only,
):
    """Pull updated base images and rebuild the containers that use them."""
    logger = logging.getLogger("lighthouseupdater")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".lighthouseupdater.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except UpdaterError as exc:
        raise click.ClickException(str(exc)) from exc

    updates = _resolve_option(updates, config_values, "updates_file")
    mounts = _resolve_option(list(mounts) or None, config_values, "updater_mounts", default=[])
    entrypoint = _resolve_option(entrypoint, config_values, "updater_entrypoint")
    updater_image = _resolve_option(updater_image, config_values, "updater_image")
    docker_binary = _resolve_option(docker_binary, config_values, "docker_binary", default="docker")
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))

    if not updates:
        raise click.ClickException("Missing required option '--updates' (or provide it in config).")
    if not entrypoint:
        raise click.ClickException("Missing required option '--entrypoint' (or provide it in config).")
    if not updater_image:
        raise click.ClickException(
            "Missing required option '--updater-image' (or provide it in config)."
        )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        container_updates = UpdateRequestLoader().load(updates)
        updater = LighthouseUpdater(
            updater_mounts=mounts,
            updater_entrypoint=entrypoint,
            updater_image=updater_image,
            docker_binary=docker_binary,
            dry_run=dry_run,
        )
    except UpdaterError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(updater.run(container_updates, pull_only=pull_only))


if __name__ == "__main__":
    main()
