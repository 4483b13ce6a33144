import subprocess

import pytest

from lighthouseupdater.errors import (
    CommandTimeout,
    PullFailure,
    PullTimeout,
    RuntimeClientError,
    TransientRuntimeError,
)
from lighthouseupdater.models import Bind
from lighthouseupdater.services.docker_runtime import DockerCliRuntime


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


class FakeCommandRunner:
    def __init__(self, stdout="", error=None):
        self.stdout = stdout
        self.error = error
        self.commands = []

    def run(self, cmd, timeout=None):
        self.commands.append((cmd, timeout))
        if self.error:
            raise self.error
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout, stderr="")


def _runtime(runner):
    return DockerCliRuntime(logger=DummyLogger(), command_runner=runner)


def test_create_container_passes_binds_before_image_and_command():
    runner = FakeCommandRunner(stdout="3f2a9c1d\n")
    runtime = _runtime(runner)

    container_id = runtime.create_container(
        "lighthouse/updater:latest",
        [Bind("/var/run/docker.sock", "/var/run/docker.sock"), Bind("/srv", "/srv")],
        ["/update.sh", "web1", "web2"],
    )

    assert container_id == "3f2a9c1d"
    assert runner.commands[0][0] == [
        "docker",
        "create",
        "--volume",
        "/var/run/docker.sock:/var/run/docker.sock",
        "--volume",
        "/srv:/srv",
        "lighthouse/updater:latest",
        "/update.sh",
        "web1",
        "web2",
    ]


def test_create_container_requires_an_id():
    runtime = _runtime(FakeCommandRunner(stdout=""))

    with pytest.raises(RuntimeClientError, match="did not report an ID"):
        runtime.create_container("updater", [], ["/update.sh"])


def test_wait_container_parses_exit_code_and_forwards_timeout():
    runner = FakeCommandRunner(stdout="137\n")
    runtime = _runtime(runner)

    assert runtime.wait_container("abc", timeout=300) == 137
    assert runner.commands == [(["docker", "wait", "abc"], 300)]


def test_wait_container_rejects_unexpected_output():
    runtime = _runtime(FakeCommandRunner(stdout="not-a-number"))

    with pytest.raises(RuntimeClientError, match="Unexpected output"):
        runtime.wait_container("abc")


def test_wait_container_keeps_transient_errors_transient():
    runtime = _runtime(FakeCommandRunner(error=TransientRuntimeError("connection reset")))

    with pytest.raises(TransientRuntimeError):
        runtime.wait_container("abc", timeout=10)


def test_pull_image_timeout_becomes_pull_timeout():
    runner = FakeCommandRunner(error=CommandTimeout("Command timed out"))
    runtime = _runtime(runner)

    with pytest.raises(PullTimeout, match="app:1.1 did not finish within 300 seconds"):
        runtime.pull_image("app", "1.1", timeout=300)

    assert runner.commands == [(["docker", "pull", "app:1.1"], 300)]


def test_pull_image_failure_becomes_pull_failure():
    runtime = _runtime(FakeCommandRunner(error=RuntimeClientError("manifest unknown")))

    with pytest.raises(PullFailure, match="manifest unknown") as exc_info:
        runtime.pull_image("app", "9.9")

    assert not isinstance(exc_info.value, PullTimeout)


def test_start_and_remove_use_custom_binary():
    runner = FakeCommandRunner()
    runtime = DockerCliRuntime(logger=DummyLogger(), command_runner=runner, docker_binary="podman")

    runtime.start_container("abc")
    runtime.remove_container("abc")

    assert [command for command, _ in runner.commands] == [["podman", "start", "abc"], ["podman", "rm", "abc"]]


def test_validate_environment_reports_missing_docker():
    runtime = _runtime(FakeCommandRunner(error=RuntimeClientError("Required command not found: docker")))

    with pytest.raises(RuntimeClientError, match="is not available"):
        runtime.validate_environment()


def test_lifecycle_commands_are_bounded_by_command_timeout():
    runner = FakeCommandRunner(stdout="abc\n")
    runtime = _runtime(runner)

    runtime.create_container("updater", [], ["/update.sh"])
    runtime.start_container("abc")
    runtime.remove_container("abc")

    assert [timeout for _, timeout in runner.commands] == [DockerCliRuntime.COMMAND_TIMEOUT_SECONDS] * 3
    assert DockerCliRuntime.COMMAND_TIMEOUT_SECONDS == 60
