"""Tests for the file watcher glue."""

import asyncio

from watchfiles import Change

from project_context.indexer import ProjectIndex
from project_context.models import ContextConfig
from project_context.watcher import SourceFilter, apply_changes, changed_paths, watch_project


class TestSourceFilter:
    def test_extensions(self, tmp_path):
        flt = SourceFilter(tmp_path)
        assert flt(Change.added, str(tmp_path / "src" / "a.ts"))
        assert flt(Change.modified, str(tmp_path / "README.md"))
        assert not flt(Change.added, str(tmp_path / "notes.txt"))

    def test_skip_dirs(self, tmp_path):
        flt = SourceFilter(tmp_path)
        assert not flt(Change.added, str(tmp_path / "node_modules" / "x" / "index.js"))
        assert not flt(Change.added, str(tmp_path / "dist" / "bundle.js"))
        assert not flt(Change.added, str(tmp_path / "pkg.egg-info" / "meta.json"))

    def test_custom_config(self, tmp_path):
        config = ContextConfig(extensions=[".go"], skip_dirs=["vendor"])
        flt = SourceFilter(tmp_path, config)
        assert flt(Change.added, str(tmp_path / "main.go"))
        assert not flt(Change.added, str(tmp_path / "a.ts"))
        assert not flt(Change.added, str(tmp_path / "vendor" / "lib.go"))


def test_changed_paths_deduplicates():
    changes = {
        (Change.modified, "/p/b.ts"),
        (Change.added, "/p/a.ts"),
        (Change.deleted, "/p/b.ts"),
    }
    assert changed_paths(changes) == ["/p/a.ts", "/p/b.ts"]
    assert changed_paths(set()) == []


def test_apply_changes(sample_copy):
    idx = ProjectIndex(sample_copy)
    idx.index_project()

    added = sample_copy / "src" / "extra.ts"
    added.write_text("export function extra() {}\n")
    modified = sample_copy / "src" / "utils" / "format.ts"
    modified.write_text("export function only() {}\n")
    deleted = sample_copy / "src" / "models" / "user.ts"
    deleted.unlink()

    paths = apply_changes(idx, {
        (Change.added, str(added)),
        (Change.modified, str(modified)),
        (Change.deleted, str(deleted)),
    })
    assert len(paths) == 3
    assert [fn.name for fn in idx.get_file(added).functions] == ["extra"]
    assert [fn.name for fn in idx.get_file(modified).functions] == ["only"]
    # deleted files stay as empty records until the next full index
    assert idx.get_file(deleted).content == ""
    assert len(idx) == 10

    idx.index_project()
    assert idx.get_file(deleted) is None
    assert len(idx) == 9


def test_apply_no_changes(sample_root):
    idx = ProjectIndex(sample_root)
    assert apply_changes(idx, []) == []
    assert len(idx) == 0


def test_watch_stops_on_event(sample_root):
    idx = ProjectIndex(sample_root)
    seen = []

    async def run():
        stop = asyncio.Event()
        stop.set()
        await watch_project(idx, on_change=seen.append, stop_event=stop)

    asyncio.run(run())
    assert seen == []
