"""Generate one non-conflicting file change per iteration.

Docs and code changes create new files whose names embed a timestamp and a
random number; config changes append a uniquely keyed line to a shared
file. If a candidate name is already taken, the random part is redrawn.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable

from prloadgen.config import ArtifactConfig
from prloadgen.models import ChangeKind, GeneratedArtifact
from prloadgen.services.git.branches import timestamp
from prloadgen.services.random_source import RandomSource
from prloadgen.templates import CODE_STUB, CONFIG_ENTRY_TEMPLATE, DOCS_NOTE_TEMPLATE, UTC_DATE_FORMAT

LOG = logging.getLogger("prloadgen.artifacts")

# Redraws before giving up on a unique name
MAX_ATTEMPTS = 100


class ArtifactError(Exception):
    """Raised when no unique artifact name could be found."""

    pass


def _unique_path(repo_dir: Path, make_name: Callable[[], str]) -> Path:
    for _ in range(MAX_ATTEMPTS):
        candidate = repo_dir / make_name()
        if not candidate.exists():
            return candidate
        LOG.debug("Artifact %s exists, redrawing", candidate)
    raise ArtifactError(f"no unique artifact name after {MAX_ATTEMPTS} attempts")


def make_docs_change(repo_dir: Path, config: ArtifactConfig, rng: RandomSource, now: datetime) -> GeneratedArtifact:
    """Write docs/pr-note-{stamp}-{rand}.md."""
    docs_dir = repo_dir / config.docs_dir
    docs_dir.mkdir(parents=True, exist_ok=True)
    stamp = timestamp(now)
    path = _unique_path(repo_dir, lambda: f"{config.docs_dir}/pr-note-{stamp}-{rng.suffix()}.md")
    content = DOCS_NOTE_TEMPLATE.format(created_at=now.astimezone(UTC).strftime(UTC_DATE_FORMAT))
    path.write_text(content, encoding="utf-8")
    return GeneratedArtifact(kind=ChangeKind.DOCS, path=path.relative_to(repo_dir).as_posix(), content=content)


def make_code_change(repo_dir: Path, config: ArtifactConfig, rng: RandomSource, now: datetime) -> GeneratedArtifact:
    """Write an executable scripts/examples/util_{stamp}_{rand}.sh stub."""
    code_dir = repo_dir / config.code_dir
    code_dir.mkdir(parents=True, exist_ok=True)
    stamp = timestamp(now).replace("-", "_")
    path = _unique_path(repo_dir, lambda: f"{config.code_dir}/util_{stamp}_{rng.suffix()}.sh")
    path.write_text(CODE_STUB, encoding="utf-8")
    path.chmod(0o755)
    return GeneratedArtifact(kind=ChangeKind.CODE, path=path.relative_to(repo_dir).as_posix(), content=CODE_STUB)


def make_config_change(repo_dir: Path, config: ArtifactConfig, rng: RandomSource, now: datetime) -> GeneratedArtifact:
    """Append entry_{stamp}_{rand}=true to the shared config file."""
    path = repo_dir / config.config_file
    path.parent.mkdir(parents=True, exist_ok=True)
    existing = path.read_text(encoding="utf-8") if path.is_file() else ""
    keys = {line.split("=", 1)[0] for line in existing.splitlines() if "=" in line}
    stamp = timestamp(now).replace("-", "_")
    for _ in range(MAX_ATTEMPTS):
        entry = CONFIG_ENTRY_TEMPLATE.format(stamp=stamp, suffix=rng.suffix())
        if entry.split("=", 1)[0] not in keys:
            break
    else:
        raise ArtifactError(f"no unique config entry after {MAX_ATTEMPTS} attempts")
    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with path.open("a", encoding="utf-8") as f:
        f.write(f"{prefix}{entry}\n")
    return GeneratedArtifact(kind=ChangeKind.CONFIG, path=path.relative_to(repo_dir).as_posix(), content=entry)


GENERATORS: dict[ChangeKind, Callable[[Path, ArtifactConfig, RandomSource, datetime], GeneratedArtifact]] = {
    ChangeKind.DOCS: make_docs_change,
    ChangeKind.CODE: make_code_change,
    ChangeKind.CONFIG: make_config_change,
}


def generate_artifact(
    kind: ChangeKind,
    repo_dir: Path,
    config: ArtifactConfig,
    rng: RandomSource,
    now: datetime,
) -> GeneratedArtifact:
    """Generate the artifact for kind under repo_dir."""
    artifact = GENERATORS[kind](Path(repo_dir), config, rng, now)
    LOG.debug("Generated %s artifact %s", kind.value, artifact.path)
    return artifact
