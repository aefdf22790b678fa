"""Shared fixtures: settings bound to tmp_path and a fake latex/dvipng/dvisvgm toolchain."""

import threading
from pathlib import Path
from typing import List, Optional

import pytest

from texsnap.config import RenderSettings
from texsnap.contexts.rendering.compiler import ProcessResult
from texsnap.contexts.rendering.workspace import WorkspaceManager, prepare_scratch_dir

FAKE_SVG = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<svg version="1.1" xmlns="http://www.w3.org/2000/svg" width="20pt" height="10pt">\n'
    "<g id=\"page1\"><path d=\"M0 0L1 1\"/></g>\n"
    "</svg>\n"
)


class FakeToolchain:
    """
    Stands in for latex, dvipng, and dvisvgm.

    latex copies the .tex content into <id>.dvi (prefixed with the id) and
    writes a log; a source containing "\\undefined" fails with a TeX error.
    dvipng and dvisvgm derive their output from the .dvi so tests can check
    which workspace produced an artifact.
    """

    def __init__(self):
        self.calls: List[List[str]] = []
        self.latex_barrier: Optional[threading.Barrier] = None
        self.latex_stderr = ""
        self.log_content: Optional[str] = None
        self.convert_fails = False
        self.extra_suffixes: List[str] = []
        self._lock = threading.Lock()

    def __call__(self, command: List[str], cwd: Path) -> ProcessResult:
        with self._lock:
            self.calls.append(command)
        tool = command[0]
        if tool == "latex":
            return self._latex(command)
        if tool == "dvipng":
            return self._convert(command, b"\x89PNG\r\n")
        if tool == "dvisvgm":
            return self._convert(command, None)
        return ProcessResult(returncode=127, stderr=f"{tool}: command not found", command=command)

    def _latex(self, command: List[str]) -> ProcessResult:
        tex_path = Path(command[-1])
        out_dir = Path(command[2].split("=", 1)[1])
        source = tex_path.read_text(encoding="utf-8")

        if self.latex_barrier is not None:
            self.latex_barrier.wait(timeout=5)

        log_path = out_dir / f"{tex_path.stem}.log"
        (out_dir / f"{tex_path.stem}.aux").write_text("\\relax\n")
        for suffix in self.extra_suffixes:
            (out_dir / f"{tex_path.stem}{suffix}").write_text("x")

        if "\\undefined" in source:
            if self.log_content is not None:
                log_path.write_text(self.log_content, encoding="latin-1")
            return ProcessResult(returncode=1, stderr=self.latex_stderr, command=command)

        log_path.write_text("This is a fake TeX log\nOutput written\n", encoding="latin-1")
        (out_dir / f"{tex_path.stem}.dvi").write_bytes(
            f"DVI:{tex_path.stem}:".encode() + source.encode("utf-8")
        )
        return ProcessResult(returncode=0, stdout="Output written", command=command)

    def _convert(self, command: List[str], png_header: Optional[bytes]) -> ProcessResult:
        if self.convert_fails:
            return ProcessResult(returncode=1, stderr="dvi file is corrupt\n", command=command)

        output_path = Path(command[command.index("-o") + 1])
        dvi = Path(command[-1]).read_bytes()
        if png_header is not None:
            output_path.write_bytes(png_header + dvi)
        else:
            output_path.write_text(FAKE_SVG.replace("<g ", f"<!-- {dvi.split(b':')[1].decode()} --><g ", 1))
        return ProcessResult(returncode=0, command=command)


@pytest.fixture
def settings(tmp_path):
    return RenderSettings(
        scratch_dir=str(tmp_path / "scratch"),
        logs_dir=str(tmp_path / "logs"),
        templates_file=str(tmp_path / "templates.json"),
    )


@pytest.fixture
def manager(settings):
    return WorkspaceManager(prepare_scratch_dir(settings.scratch_path))


@pytest.fixture
def toolchain():
    return FakeToolchain()
