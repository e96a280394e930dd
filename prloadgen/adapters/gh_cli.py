"""PRHost backed by the GitHub CLI (gh)."""

import logging
import shutil
import subprocess
from pathlib import Path

from prloadgen.adapters.base import HostError, PRHost


class GhCLIHost(PRHost):
    """Open pull requests with `gh pr create` from inside repo_dir."""

    missing_message = "Error: GitHub CLI (gh) not found in PATH"
    unauthenticated_message = "Error: gh CLI is not authenticated. Run: gh auth login"

    def __init__(
        self,
        command: str = "gh",
        repo_dir: Path | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.command = command
        self.repo_dir = Path(repo_dir) if repo_dir is not None else Path.cwd()
        self._log = log or logging.getLogger("prloadgen.host")

    def _run_gh(self, args: list[str]) -> str:
        """Run gh with args; return stdout or raise HostError on failure."""
        cmd = [self.command] + args
        self._log.debug("Running %s", " ".join(cmd[:3]))
        try:
            result = subprocess.run(cmd, cwd=self.repo_dir, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            err = (e.stderr or e.stdout or "").strip()
            self._log.warning("gh %s failed: %s", " ".join(args[:2]), err)
            raise HostError(f"{self.command} {' '.join(args[:2])}: {err}") from e
        except FileNotFoundError as e:
            raise HostError(f"{self.command} not found") from e
        return result.stdout or ""

    def is_installed(self) -> bool:
        return shutil.which(self.command) is not None

    def is_authenticated(self) -> bool:
        try:
            self._run_gh(["auth", "status"])
        except HostError:
            return False
        return True

    def create_pr(self, base: str, head: str, title: str, body: str) -> str:
        out = self._run_gh(
            ["pr", "create", "--base", base, "--head", head, "--title", title, "--body", body]
        )
        # gh prints the PR URL as the last line of stdout
        lines = [line.strip() for line in out.splitlines() if line.strip()]
        return lines[-1] if lines else ""
