from __future__ import annotations

import logging
import os
import pwd
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from ..errors import PreconditionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The non-privileged user the desktop is provisioned for."""

    name: str
    uid: int
    gid: int
    home: str

    @property
    def home_path(self) -> Path:
        return Path(self.home)

    @property
    def config_home(self) -> Path:
        return self.home_path / ".config"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Identity":
        return cls(
            name=str(data["name"]),
            uid=int(data["uid"]),
            gid=int(data["gid"]),
            home=str(data["home"]),
        )

    @classmethod
    def from_passwd(cls, name: str) -> "Identity":
        try:
            pw = pwd.getpwnam(name)
        except KeyError as e:
            raise PreconditionError(f"Unknown user: {name}") from e
        return cls(name=pw.pw_name, uid=pw.pw_uid, gid=pw.pw_gid, home=pw.pw_dir)


def resolve_identity(
    *,
    require_root: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> Identity:
    """Confirm elevated execution and resolve the invoking user.

    The installer must run through sudo: root is needed for pacman, while
    dotfiles, AUR builds and fonts belong to the user named by SUDO_USER.
    With require_root=False (dry runs) the current user stands in.
    """

    env = os.environ if environ is None else environ
    sudo_user = (env.get("SUDO_USER") or "").strip()

    if os.geteuid() != 0:
        if require_root:
            raise PreconditionError("Run as root (sudo)")
        if sudo_user:
            return Identity.from_passwd(sudo_user)
        pw = pwd.getpwuid(os.getuid())
        return Identity(name=pw.pw_name, uid=pw.pw_uid, gid=pw.pw_gid, home=pw.pw_dir)

    if not sudo_user:
        raise PreconditionError("SUDO_USER not set. Run with sudo -E")
    if sudo_user == "root":
        raise PreconditionError("Refusing to provision the root account; run sudo from a regular user")

    identity = Identity.from_passwd(sudo_user)
    logger.info("Installing for user: %s (home=%s)", identity.name, identity.home)
    return identity


def user_cmd(identity: Identity, argv: Sequence[str]) -> list[str]:
    """Wrap argv so it runs as the invoking user."""

    if os.geteuid() == identity.uid:
        return list(argv)
    return ["sudo", "-u", identity.name, *argv]
