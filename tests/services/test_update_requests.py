import pytest

from lighthouseupdater.errors import ConfigurationError
from lighthouseupdater.models import ImageUpdate
from lighthouseupdater.services.update_requests import UpdateRequestLoader


def test_loader_builds_container_updates(tmp_path):
    updates_file = tmp_path / "updates.yml"
    updates_file.write_text(
        "- image: app\n"
        "  tag: '1.1'\n"
        "  source_images: [app:1.0]\n"
        "  names: [web1, web2]\n"
        "- image: app\n"
        "  tag: '1.1'\n"
        "  names: worker\n",
        encoding="utf-8",
    )

    updates = UpdateRequestLoader().load(str(updates_file))

    assert updates[0].image_update == ImageUpdate("app", "1.1")
    assert updates[0].image_update.source_image_names == ("app:1.0",)
    assert updates[0].names == ("web1", "web2")
    assert updates[1].names == ("worker",)
    assert updates[1].image_update == updates[0].image_update


def test_loader_reports_entry_with_missing_keys(tmp_path):
    updates_file = tmp_path / "updates.yml"
    updates_file.write_text("- image: app\n  names: [web1]\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Update #0 is missing: tag"):
        UpdateRequestLoader().load(str(updates_file))


def test_loader_requires_a_list(tmp_path):
    updates_file = tmp_path / "updates.yml"
    updates_file.write_text("image: app\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="YAML list"):
        UpdateRequestLoader().load(str(updates_file))


def test_loader_rejects_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        UpdateRequestLoader().load(str(tmp_path / "missing.yml"))


@pytest.mark.parametrize(
    "body, key",
    [
        ("- image: python\n  tag: 3.10\n  names: [web1]\n", "tag"),
        ("- image: 42\n  tag: '1'\n  names: [web1]\n", "image"),
    ],
)
def test_loader_rejects_unquoted_numeric_values(tmp_path, body, key):
    updates_file = tmp_path / "updates.yml"
    updates_file.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigurationError, match=f"Update #0: `{key}` must be a quoted string"):
        UpdateRequestLoader().load(str(updates_file))


def test_loader_rejects_numeric_container_names(tmp_path):
    updates_file = tmp_path / "updates.yml"
    updates_file.write_text("- image: app\n  tag: '1'\n  names: [101]\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="`names` must be a string or a list of strings"):
        UpdateRequestLoader().load(str(updates_file))
