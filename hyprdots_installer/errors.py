from __future__ import annotations

from typing import Sequence


class InstallerError(Exception):
    """Base class for failures that abort the run."""


class PreconditionError(InstallerError):
    """Environment is not fit to run in (privileges, user, manifest)."""


class CommandError(InstallerError):
    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stderr: str = "",
        *,
        label: str | None = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        self.label = label
        head = label or "Command failed"
        msg = f"{head} ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class LinkError(InstallerError):
    """A config directory could not be replaced by its symlink."""


class BackupError(InstallerError):
    """An existing config could not be copied to the backup dir."""
