import os
from pathlib import Path
from dataclasses import dataclass

DATA_DIR_ENV = "SW_DATA_DIR"

# mkdir -p that hands the path back, so folders can be declared inline below.
def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the per-user data root. SW_DATA_DIR wins (handy for tests and portable installs), then the usual
# APPDATA location on Windows, then a dot folder in the home directory everywhere else.
def _data_root():
    override = os.getenv(DATA_DIR_ENV)
    if override:
        return Path(override)
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "Stopwatch"
    return Path.home() / ".stopwatch"

# Where the stopwatch keeps its settings, logs and default export target.
@dataclass(frozen=True)
class ProjectPaths:
    data: Path
    logs: Path
    exports: Path

    @classmethod
    def under(cls, root: Path):
        root = ensure_directory(Path(root))
        return cls(data=root, logs=ensure_directory(root / "logs"), exports=ensure_directory(root / "exports"))

PATHS = ProjectPaths.under(_data_root())
