"""Actionable error catalog for lighthouseupdater."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "invalid_mount": {
        "what": "Mount '{mount}' did not conform to 'source:dest' format.",
        "next": "Fix `updater_mounts` so every entry is `<host path>:<container path>`.",
    },
    "docker_unavailable": {
        "what": "Docker command '{binary}' is not available.",
        "next": "Install Docker or point `--docker-binary` at a working client.",
    },
    "pull_failed": {
        "what": "Pulling {image} failed.",
        "next": "Check registry access; the rebuild will use the locally cached image.",
    },
    "pull_timeout": {
        "what": "Pulling {image} did not finish within {seconds} seconds.",
        "next": "Check registry reachability and retry the update.",
    },
    "rebuild_timeout": {
        "what": "Updater container {container_id} did not exit within {seconds} seconds.",
        "next": "Inspect it with `docker logs {container_id}` and remove it manually once finished.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
