"""
Per-request workspaces inside the shared scratch directory.

Every request gets a fresh uuid4 id and only ever touches files named after
that id, so concurrent requests never see each other's files:

    <scratch>/<id>.tex   source written for latex
    <scratch>/<id>.dvi   intermediate output of latex
    <scratch>/<id>.log   latex log (scraped for "!" error lines)
    <scratch>/<id>.aux   latex auxiliary file
    <scratch>/<id>.png   dvipng output
    <scratch>/<id>.svg   dvisvgm output

The scratch directory is emptied once at process startup by prepare_scratch_dir()
and never swept again; afterwards files are only removed per id by release().
"""

import shutil
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from texsnap.contexts.rendering.logger import _log_debug, _log_info

# Every file latex, dvipng, or dvisvgm can leave behind for a workspace
OWNED_SUFFIXES = [".tex", ".dvi", ".log", ".aux", ".png", ".svg"]


@dataclass(frozen=True)
class Workspace:
    """
    Namespace of files for one render request.

    Attributes:
        id: Unique id (uuid4 hex) shared by every file of the request
        scratch_dir: Process-wide scratch directory holding the files
    """

    id: str
    scratch_dir: Path

    def _path(self, suffix: str) -> Path:
        return self.scratch_dir / f"{self.id}{suffix}"

    @property
    def tex_path(self) -> Path:
        return self._path(".tex")

    @property
    def dvi_path(self) -> Path:
        return self._path(".dvi")

    @property
    def log_path(self) -> Path:
        return self._path(".log")

    @property
    def aux_path(self) -> Path:
        return self._path(".aux")

    @property
    def png_path(self) -> Path:
        return self._path(".png")

    @property
    def svg_path(self) -> Path:
        return self._path(".svg")

    @property
    def owned_paths(self) -> List[Path]:
        return [self._path(suffix) for suffix in OWNED_SUFFIXES]


def prepare_scratch_dir(scratch_dir: Path) -> Path:
    """
    Create the scratch directory and remove everything inside it.

    Call exactly once at process startup, before any request is served.

    Args:
        scratch_dir: Directory to prepare

    Returns:
        Resolved scratch directory path
    """
    scratch_dir = Path(scratch_dir).resolve()
    scratch_dir.mkdir(parents=True, exist_ok=True)

    removed = 0
    for entry in scratch_dir.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
        removed += 1

    _log_info(f"Scratch directory ready: {scratch_dir} ({removed} stale entries removed)")
    return scratch_dir


class WorkspaceManager:
    """
    Allocates and releases per-request workspaces.

    Holds no per-request state; safe to share across threads.
    """

    def __init__(self, scratch_dir: Path):
        """
        Args:
            scratch_dir: Scratch directory already prepared by prepare_scratch_dir()
        """
        self.scratch_dir = Path(scratch_dir).resolve()

    def allocate(self) -> Workspace:
        """Create a workspace with a fresh unique id. No files are created."""
        workspace = Workspace(id=uuid.uuid4().hex, scratch_dir=self.scratch_dir)
        _log_debug(f"Allocated workspace {workspace.id}")
        return workspace

    def release(self, workspace: Workspace) -> None:
        """
        Delete every file owned by a workspace.

        Covers the known paths plus any other <id>.* file latex left behind
        (.out, .toc, .nav, ... from user-supplied full documents). Each deletion
        is attempted independently and failures are ignored; release never raises.
        """
        paths = list(workspace.owned_paths)
        try:
            paths.extend(p for p in self.scratch_dir.glob(f"{workspace.id}.*") if p not in paths)
        except OSError as e:
            _log_debug(f"Could not list files of {workspace.id}: {e}")

        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                _log_debug(f"Could not remove {path.name}: {e}")
        _log_debug(f"Released workspace {workspace.id}")

    @contextmanager
    def workspace(self) -> Iterator[Workspace]:
        """
        Allocate a workspace for the duration of a with-block.

        Example:
            with manager.workspace() as ws:
                ws.tex_path.write_text(document)
        """
        workspace = self.allocate()
        try:
            yield workspace
        finally:
            self.release(workspace)
