"""Tests for prloadgen.services.artifacts (per-kind file changes)."""

import os
import stat
from datetime import UTC, datetime
from pathlib import Path

import pytest

from prloadgen.config import ArtifactConfig
from prloadgen.models import ChangeKind
from prloadgen.services.artifacts import (
    ArtifactError,
    generate_artifact,
    make_code_change,
    make_config_change,
    make_docs_change,
)
from prloadgen.testing import ScriptedRandom

NOW = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)


@pytest.fixture
def config() -> ArtifactConfig:
    return ArtifactConfig()


class TestDocsChange:
    """make_docs_change writes a markdown note under docs/."""

    def test_writes_note(self, tmp_path: Path, config: ArtifactConfig) -> None:
        """Note path embeds timestamp and suffix; content has heading and UTC time."""
        artifact = make_docs_change(tmp_path, config, ScriptedRandom(suffixes=[4242]), NOW)
        assert artifact.kind is ChangeKind.DOCS
        assert artifact.path == "docs/pr-note-20240115-100000-4242.md"
        text = (tmp_path / artifact.path).read_text(encoding="utf-8")
        assert text.startswith("# PR Note\n")
        assert "Created at: Mon Jan 15 10:00:00 UTC 2024" in text
        assert "testing of PR workflows" in text

    def test_redraws_suffix_on_collision(self, tmp_path: Path, config: ArtifactConfig) -> None:
        """An existing file with the same name forces a new suffix."""
        rng = ScriptedRandom(suffixes=[1, 1, 2])
        first = make_docs_change(tmp_path, config, rng, NOW)
        second = make_docs_change(tmp_path, config, rng, NOW)
        assert first.path.endswith("-1.md")
        assert second.path.endswith("-2.md")

    def test_gives_up_after_max_attempts(self, tmp_path: Path, config: ArtifactConfig) -> None:
        """ArtifactError when every draw collides."""
        make_docs_change(tmp_path, config, ScriptedRandom(suffixes=[5]), NOW)
        with pytest.raises(ArtifactError):
            make_docs_change(tmp_path, config, ScriptedRandom(suffixes=[5] * 200), NOW)


class TestCodeChange:
    """make_code_change writes an executable shell stub."""

    def test_writes_executable_stub(self, tmp_path: Path, config: ArtifactConfig) -> None:
        """Stub is under scripts/examples, starts with a bash shebang, and is executable."""
        artifact = make_code_change(tmp_path, config, ScriptedRandom(suffixes=[77]), NOW)
        assert artifact.path == "scripts/examples/util_20240115_100000_77.sh"
        path = tmp_path / artifact.path
        assert path.read_text(encoding="utf-8").startswith("#!/bin/bash\n")
        assert '$(date -u)' in artifact.content
        if os.name == "posix":
            assert path.stat().st_mode & stat.S_IXUSR


class TestConfigChange:
    """make_config_change appends one entry per call to the shared file."""

    def test_appends_entries(self, tmp_path: Path, config: ArtifactConfig) -> None:
        """Each call appends a unique line; the file keeps earlier lines."""
        rng = ScriptedRandom(suffixes=[1, 2])
        a = make_config_change(tmp_path, config, rng, NOW)
        b = make_config_change(tmp_path, config, rng, NOW)
        assert a.path == b.path == ".pr-test-config.ini"
        lines = (tmp_path / ".pr-test-config.ini").read_text(encoding="utf-8").splitlines()
        assert lines == ["entry_20240115_100000_1=true", "entry_20240115_100000_2=true"]

    def test_duplicate_key_is_redrawn(self, tmp_path: Path, config: ArtifactConfig) -> None:
        """An entry key already in the file is not written twice."""
        rng = ScriptedRandom(suffixes=[3, 3, 4])
        make_config_change(tmp_path, config, rng, NOW)
        second = make_config_change(tmp_path, config, rng, NOW)
        assert second.content == "entry_20240115_100000_4=true"

    def test_missing_trailing_newline_is_repaired(self, tmp_path: Path, config: ArtifactConfig) -> None:
        """Existing content without a final newline gets one before the entry."""
        (tmp_path / ".pr-test-config.ini").write_text("existing=1", encoding="utf-8")
        make_config_change(tmp_path, config, ScriptedRandom(suffixes=[9]), NOW)
        lines = (tmp_path / ".pr-test-config.ini").read_text(encoding="utf-8").splitlines()
        assert lines == ["existing=1", "entry_20240115_100000_9=true"]


def test_generate_artifact_dispatches_by_kind(tmp_path: Path) -> None:
    """generate_artifact uses the generator for the given kind and custom dirs."""
    cfg = ArtifactConfig(docs_dir="notes", code_dir="bin", config_file="conf/test.ini")
    rng = ScriptedRandom(suffixes=[1, 2, 3])
    assert generate_artifact(ChangeKind.DOCS, tmp_path, cfg, rng, NOW).path.startswith("notes/")
    assert generate_artifact(ChangeKind.CODE, tmp_path, cfg, rng, NOW).path.startswith("bin/")
    assert generate_artifact(ChangeKind.CONFIG, tmp_path, cfg, rng, NOW).path == "conf/test.ini"


def test_paths_unique_across_many_iterations(tmp_path: Path, config: ArtifactConfig) -> None:
    """Same-second docs and code artifacts never share a path."""
    rng = ScriptedRandom(seed=3)
    paths = [make_docs_change(tmp_path, config, rng, NOW).path for _ in range(50)]
    paths += [make_code_change(tmp_path, config, rng, NOW).path for _ in range(50)]
    assert len(set(paths)) == len(paths)
