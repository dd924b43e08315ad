"""Keep a ProjectIndex current by re-indexing files as they change on disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Iterable

from watchfiles import Change, DefaultFilter, awatch

from project_context.indexer import ProjectIndex
from project_context.models import ContextConfig
from project_context.scanner import should_skip

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[list[str]], None]


class SourceFilter(DefaultFilter):
    """Pass only indexed extensions outside the configured skip dirs."""

    def __init__(self, root: Path | str, config: ContextConfig | None = None):
        config = config or ContextConfig()
        self.root = Path(root)
        self.extensions = tuple(ext.lower() for ext in config.extensions)
        self.skip_dirs = list(config.skip_dirs)
        super().__init__()

    def __call__(self, change: Change, path: str) -> bool:
        if not path.lower().endswith(self.extensions):
            return False
        try:
            rel = Path(path).relative_to(self.root)
        except ValueError:
            rel = Path(path)
        if should_skip(rel, self.skip_dirs):
            return False
        return super().__call__(change, path)


def changed_paths(changes: Iterable[tuple[Change, str]]) -> list[str]:
    """Collapse a watchfiles batch into sorted unique paths.

    Added, modified and deleted are treated alike.
    """
    return sorted({path for _, path in changes})


def apply_changes(index: ProjectIndex, changes: Iterable[tuple[Change, str]]) -> list[str]:
    paths = changed_paths(changes)
    if paths:
        index.reindex_files(paths)
    return paths


async def watch_project(
    index: ProjectIndex,
    on_change: ChangeCallback | None = None,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Watch the index root until *stop_event* is set."""
    root = index.project_root
    logger.info("Watching %s for changes", root)
    async for changes in awatch(
        root,
        watch_filter=SourceFilter(root, index.config),
        debounce=index.config.watch_debounce_ms,
        stop_event=stop_event,
    ):
        paths = await asyncio.to_thread(apply_changes, index, changes)
        logger.info("Re-indexed %d changed files", len(paths))
        if on_change:
            on_change(paths)
