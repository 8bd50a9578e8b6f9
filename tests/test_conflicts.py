"""Tests for petridish.rendering.conflicts."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

import pytest

from petridish.core.errors import DestinationConflictError
from petridish.core.models import ConflictPolicy, FileEntry, RenderPlan
from petridish.rendering.conflicts import apply_policy, find_blocked, find_collisions


@pytest.fixture
def plan(tmp_path: Path) -> RenderPlan:
    plan = RenderPlan("demo")
    for name in ("a.txt", "b.txt", "c.txt"):
        plan.add(FileEntry(PurePosixPath("demo", name), name, 0o644, tmp_path / name))
    return plan


@pytest.fixture
def dest(tmp_path: Path) -> Path:
    root = tmp_path / "dest"
    (root / "demo").mkdir(parents=True)
    (root / "demo" / "b.txt").write_text("existing")
    return root


class TestFindCollisions:
    def test_reports_existing_paths(self, plan: RenderPlan, dest: Path):
        assert find_collisions(plan, dest) == {
            PurePosixPath("demo/b.txt"): dest / "demo" / "b.txt"
        }

    def test_dangling_symlink_counts(self, plan: RenderPlan, dest: Path):
        os.symlink("nowhere", dest / "demo" / "c.txt")
        assert PurePosixPath("demo/c.txt") in find_collisions(plan, dest)

    def test_missing_destination_has_no_collisions(self, plan: RenderPlan, tmp_path: Path):
        assert find_collisions(plan, tmp_path / "absent") == {}


class TestFindBlocked:
    def test_file_in_place_of_parent(self, tmp_path: Path):
        plan = RenderPlan("demo")
        plan.add(FileEntry(PurePosixPath("demo/sub/a.txt"), "a", 0o644, tmp_path / "a"))
        dest = tmp_path / "dest"
        (dest / "demo").mkdir(parents=True)
        (dest / "demo" / "sub").write_text("file")

        assert find_blocked(plan, dest) == {
            PurePosixPath("demo/sub/a.txt"): dest / "demo" / "sub"
        }

    def test_symlinked_parent(self, tmp_path: Path):
        plan = RenderPlan("demo")
        plan.add(FileEntry(PurePosixPath("demo/sub/a.txt"), "a", 0o644, tmp_path / "a"))
        dest = tmp_path / "dest"
        dest.mkdir()
        (tmp_path / "real").mkdir()
        os.symlink(tmp_path / "real", dest / "demo")

        assert find_blocked(plan, dest) == {PurePosixPath("demo/sub/a.txt"): dest / "demo"}

    def test_directory_at_file_path(self, plan: RenderPlan, dest: Path):
        (dest / "demo" / "a.txt").mkdir()

        assert find_blocked(plan, dest) == {PurePosixPath("demo/a.txt"): dest / "demo" / "a.txt"}

    def test_plain_file_collision_is_not_blocked(self, plan: RenderPlan, dest: Path):
        assert find_blocked(plan, dest) == {}


class TestApplyPolicy:
    def test_fail_raises_with_paths(self, plan: RenderPlan, dest: Path):
        with pytest.raises(DestinationConflictError) as excinfo:
            apply_policy(plan, dest, ConflictPolicy.FAIL)
        assert excinfo.value.paths == [dest / "demo" / "b.txt"]
        assert "--force" in str(excinfo.value)

    def test_skip_filters_colliding_entries(self, plan: RenderPlan, dest: Path):
        to_commit, skipped = apply_policy(plan, dest, ConflictPolicy.SKIP)
        assert skipped == [PurePosixPath("demo/b.txt")]
        assert to_commit.paths == [PurePosixPath("demo/a.txt"), PurePosixPath("demo/c.txt")]
        assert len(plan) == 3

    def test_overwrite_keeps_everything(self, plan: RenderPlan, dest: Path):
        to_commit, skipped = apply_policy(plan, dest, ConflictPolicy.OVERWRITE)
        assert to_commit is plan
        assert skipped == []

    def test_no_collision_passes_under_fail(self, plan: RenderPlan, tmp_path: Path):
        to_commit, skipped = apply_policy(plan, tmp_path / "fresh", ConflictPolicy.FAIL)
        assert to_commit is plan
        assert skipped == []

    def test_fail_reports_blocking_parent(self, plan: RenderPlan, tmp_path: Path):
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "demo").write_text("file")

        with pytest.raises(DestinationConflictError) as excinfo:
            apply_policy(plan, dest, ConflictPolicy.FAIL)
        assert excinfo.value.paths == [dest / "demo"]

    def test_overwrite_refuses_directory_in_the_way(self, plan: RenderPlan, dest: Path):
        (dest / "demo" / "c.txt").mkdir()

        with pytest.raises(DestinationConflictError) as excinfo:
            apply_policy(plan, dest, ConflictPolicy.OVERWRITE)
        assert excinfo.value.paths == [dest / "demo" / "c.txt"]
        assert "directory" in str(excinfo.value)

    def test_skip_drops_blocked_entries(self, plan: RenderPlan, dest: Path):
        (dest / "demo" / "c.txt").mkdir()

        to_commit, skipped = apply_policy(plan, dest, ConflictPolicy.SKIP)
        assert skipped == [PurePosixPath("demo/b.txt"), PurePosixPath("demo/c.txt")]
        assert to_commit.paths == [PurePosixPath("demo/a.txt")]
