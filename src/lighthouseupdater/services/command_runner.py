"""Subprocess execution service for lighthouseupdater."""

import subprocess
from typing import List, Optional

from lighthouseupdater.errors import CommandTimeout, RuntimeClientError, TransientRuntimeError


class CommandRunner:
    """Runs external commands and classifies their failures."""

    TRANSIENT_FAILURE_PATTERNS = (
        "connection reset",
        "connection refused",
        "temporary failure",
        "name resolution",
        "timed out",
        "timeout",
        "network is unreachable",
        "no route to host",
        "service unavailable",
        "context deadline exceeded",
        "i/o timeout",
        "unexpected eof",
        "tls handshake timeout",
        "too many requests",
        "is the docker daemon running",
        "error during connect",
    )

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def run(
        self,
        cmd: List[str],
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout
        try:
            result = subprocess.run(
                cmd,
                text=True,
                capture_output=True,
                timeout=effective_timeout,
            )
        except FileNotFoundError as exc:
            raise RuntimeClientError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeout(
                f"Command timed out after {effective_timeout}s: {cmd_str}"
            ) from exc
        except OSError as exc:
            raise RuntimeClientError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip()
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if self.is_transient_failure(stderr):
            raise TransientRuntimeError(message)
        raise RuntimeClientError(message)

    def is_transient_failure(self, output: str) -> bool:
        lowered = output.lower()
        return any(pattern in lowered for pattern in self.TRANSIENT_FAILURE_PATTERNS)
