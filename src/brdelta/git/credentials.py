"""Credential handling for cloning upstream repositories."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import pygit2

from brdelta.core.logging import get_logger

if TYPE_CHECKING:
    from pygit2.enums import CredentialType

log = get_logger("git.credentials")

# libgit2 keeps asking while credentials are rejected
_MAX_ATTEMPTS = 3


class KeyFileCredentials(pygit2.RemoteCallbacks):
    """
    RemoteCallbacks for clones of package sources.

    Supports:
    - SSH via an explicit private key file, or the SSH agent when none is configured
    - HTTPS via git-credential-manager or other configured helpers
    """

    def __init__(self, key: Path | None = None) -> None:
        super().__init__()
        self._key = key
        self._attempts = 0

    @property
    def key(self) -> Path | None:
        return self._key

    def credentials(  # type: ignore[override]
        self,
        url: str,
        username_from_url: str | None,
        allowed_types: CredentialType,
    ) -> pygit2.Username | pygit2.UserPass | pygit2.Keypair | None:
        """Provide credentials for remote operations."""
        self._attempts += 1
        if self._attempts > _MAX_ATTEMPTS:
            raise pygit2.GitError(f"authentication failed for {url}: credentials rejected")

        if allowed_types & pygit2.enums.CredentialType.SSH_KEY:
            username = username_from_url or "git"
            if self._key is not None:
                log.debug("ssh_key_credentials", url=url, key=str(self._key))
                return pygit2.Keypair(username, None, str(self._key), "")
            return pygit2.KeypairFromAgent(username)

        if allowed_types & pygit2.enums.CredentialType.USERPASS_PLAINTEXT:
            creds = self._query_credential_helper(url)
            if creds:
                return pygit2.UserPass(creds["username"], creds["password"])

        return None

    def _query_credential_helper(self, url: str) -> dict[str, str] | None:
        """
        Query system git credential helper.

        Invokes: git credential fill
        See: https://git-scm.com/docs/git-credential
        """
        parsed = urlparse(url)
        host = parsed.hostname or parsed.netloc
        input_lines = [
            f"protocol={parsed.scheme}",
            f"host={host}",
        ]
        if parsed.port is not None:
            input_lines.append(f"port={parsed.port}")
        if parsed.path:
            input_lines.append(f"path={parsed.path.lstrip('/')}")
        input_lines.append("")  # Empty line terminates input
        input_data = "\n".join(input_lines)

        try:
            result = subprocess.run(
                ["git", "credential", "fill"],
                input=input_data,
                capture_output=True,
                text=True,
                timeout=30,
                check=False,
            )
            if result.returncode != 0:
                return None

            creds: dict[str, str] = {}
            for line in result.stdout.strip().split("\n"):
                if "=" in line:
                    key, value = line.split("=", 1)
                    creds[key] = value

            if "username" in creds and "password" in creds:
                return creds
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            # No git binary or no helper configured: clone proceeds anonymously
            log.debug("credential_helper_unavailable", url=url, error=str(e))

        return None


def default_ssh_key() -> Path | None:
    """``~/.ssh/id_rsa`` if present."""
    try:
        candidate = Path.home() / ".ssh" / "id_rsa"
    except RuntimeError:
        # No resolvable home directory
        return None
    return candidate if candidate.is_file() else None


def make_callbacks(key: Path | None = None) -> KeyFileCredentials:
    """Fresh callbacks for one clone; attempt counting is per clone."""
    return KeyFileCredentials(key)
