"""Base image pulling service for lighthouseupdater."""

from lighthouseupdater.models import ImageUpdate


class ImageUpdaterService:
    """Pulls a single base image, bounded by a fixed ceiling."""

    PULL_TIMEOUT_SECONDS = 5 * 60

    def __init__(self, logger, runtime, pull_timeout_seconds: float = PULL_TIMEOUT_SECONDS):
        self.logger = logger
        self.runtime = runtime
        self.pull_timeout_seconds = pull_timeout_seconds

    def update_base_image(self, update: ImageUpdate):
        self.logger.info(
            "Updating base image %s for %s",
            update.name_with_tag,
            list(update.source_image_names),
        )
        self.runtime.pull_image(update.name, update.tag, timeout=self.pull_timeout_seconds)
