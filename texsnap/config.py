"""
Settings for texsnap.

Settings come from three layers, later layers overriding earlier ones:
    1. RenderSettings defaults (below)
    2. Optional YAML file (argument, or TEXSNAP_CONFIG env variable)
    3. Environment variables (a .env file is loaded first)

Examples:
    >>> settings = load_settings()
    >>> settings = load_settings(Path("configs/texsnap.yaml"))
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

# Environment variable -> settings field
ENV_OVERRIDES = {
    "TEXSNAP_SCRATCH_DIR": "scratch_dir",
    "TEXSNAP_LOGS_DIR": "logs_dir",
    "TEXSNAP_TEMPLATES_FILE": "templates_file",
    "LATEX_COMPILER": "latex_command",
    "DVIPNG_COMMAND": "dvipng_command",
    "DVISVGM_COMMAND": "dvisvgm_command",
}


@dataclass
class RenderSettings:
    """
    Process-wide configuration.

    Attributes:
        scratch_dir: Directory holding every per-request workspace. Emptied once
            at process startup and never swept again.
        logs_dir: Parent directory for timestamped log sessions
        templates_file: JSON file backing the named-template store
        latex_command: Typesetting compiler (stage 1)
        dvipng_command: Rasterizer (stage 2, PNG)
        dvisvgm_command: Vector converter (stage 2, SVG)
        default_resolution: DPI used when a request gives none or an invalid one
        math_packages: Packages loaded by the built-in math template
        tikz_packages: Packages loaded by the built-in drawing template
        tikz_libraries: TikZ libraries loaded by the built-in drawing template
    """

    scratch_dir: str = "outs/scratch"
    logs_dir: str = "outs/logs"
    templates_file: str = "outs/templates.json"
    latex_command: str = "latex"
    dvipng_command: str = "dvipng"
    dvisvgm_command: str = "dvisvgm"
    default_resolution: int = 300
    math_packages: List[str] = field(
        default_factory=lambda: ["amsmath", "amssymb", "amsfonts", "mathtools"]
    )
    tikz_packages: List[str] = field(default_factory=lambda: ["amsmath", "amssymb", "tikz"])
    tikz_libraries: List[str] = field(
        default_factory=lambda: ["arrows.meta", "positioning", "calc"]
    )

    @property
    def scratch_path(self) -> Path:
        return Path(self.scratch_dir).resolve()

    @property
    def logs_path(self) -> Path:
        return Path(self.logs_dir).resolve()

    @property
    def templates_path(self) -> Path:
        return Path(self.templates_file).resolve()


def load_settings(config_path: Optional[Path] = None) -> RenderSettings:
    """
    Build settings from defaults, an optional YAML file, and the environment.

    Args:
        config_path: YAML file with any subset of RenderSettings fields
                     (defaults to TEXSNAP_CONFIG env variable, if set)

    Returns:
        RenderSettings instance

    Raises:
        FileNotFoundError: If an explicit config path does not exist
    """
    if config_path is None and os.getenv("TEXSNAP_CONFIG"):
        config_path = Path(os.getenv("TEXSNAP_CONFIG"))

    config = OmegaConf.structured(RenderSettings)

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        config = OmegaConf.merge(config, OmegaConf.load(config_path))

    overrides = {
        key: os.environ[env_name] for env_name, key in ENV_OVERRIDES.items() if os.getenv(env_name)
    }
    if overrides:
        config = OmegaConf.merge(config, OmegaConf.create(overrides))

    return OmegaConf.to_object(config)
