import os
from pathlib import Path
from dataclasses import dataclass

# Name of the environment variable that can point the app at a different data folder (handy for tests and
# portable installs).
HOME_ENV_VAR = "MULTITIMER_HOME"

# Lil helper function to create a directory (and any parents) if it's missing.
def ensure_directory(path: Path):
    path.mkdir(parents=True,exist_ok=True)
    return path

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path

    @staticmethod
    def build(data_dir=None):
        # Folder for all user-specific stuff (settings and logs). Env var wins over the default home folder.
        if data_dir is None:
            env_dir = os.getenv(HOME_ENV_VAR)
            data_dir = Path(env_dir) if env_dir else Path.home() / ".multitimer"
        data = ensure_directory(Path(data_dir))
        logs = ensure_directory(data / "logs")

        return ProjectPaths(
            data = data,
            logs = logs,
        )
PATHS = ProjectPaths.build()
