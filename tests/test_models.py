import pytest

from lighthouseupdater.errors import ConfigurationError
from lighthouseupdater.models import ContainerUpdate, ImageUpdate, RebuildReport, RebuildState


def test_image_updates_compare_by_name_and_tag_only():
    first = ImageUpdate("app", "1.1", source_image_names=("app:1.0",))
    second = ImageUpdate("app", "1.1", source_image_names=("app:0.9",))

    assert first == second
    assert len({first, second}) == 1
    assert first != ImageUpdate("app", "1.2")
    assert first.name_with_tag == "app:1.1"


def test_container_update_requires_names():
    with pytest.raises(ConfigurationError, match="names no containers"):
        ContainerUpdate(image_update=ImageUpdate("app", "1.1"), names=())


def test_container_update_accepts_single_name_string():
    update = ContainerUpdate(image_update=ImageUpdate("app", "1.1"), names="web1")

    assert update.names == ("web1",)


def test_report_defaults():
    report = RebuildReport()

    assert report.state == RebuildState.IDLE
    assert report.succeeded is False
    assert report.exit_ok is True
