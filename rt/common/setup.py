import os
import sys
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Ensures that, while running in a frozen (exe) build, the path of the running exe is EXACTLY paths.root / exe_name.
def assert_running_from_install_root(expected_path: Path):
    # Running from source, so we just ignore it
    if not getattr(sys, "frozen", False):
        return

    actual_exe = Path(sys.executable).resolve()
    expected_exe = expected_path.resolve()

    if actual_exe != expected_exe:
        raise RuntimeError(
            "Application is being run from an unexpected location.\n"
            f"Expected: {expected_exe}\n"
            f"Actual:   {actual_exe}"
        )

# Resolves where user data lives. RENTALTIMER_HOME always wins (tests and portable installs), then APPDATA on
# Windows, then a dot folder in the user's home.
def _data_root():
    override = os.getenv("RENTALTIMER_HOME")
    if override:
        return Path(override)
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "RentalTimer"
    return Path.home() / ".rentaltimer"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    root: Path
    data: Path

    logs: Path
    current: Path
    snapshots: Path

    @staticmethod
    def build():
        # Folder for the install itself, no user-specific files, just runtime
        if getattr(sys, "frozen", False):
            root = Path(sys.executable).resolve().parent
        else:
            root = Path(__file__).resolve().parents[2]

        # Folder for all rentaltimer user-specific and session related stuff
        data = ensure_directory(_data_root())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        current = ensure_directory(data / "current")
        snapshots = ensure_directory(data / "snapshots")

        return ProjectPaths(
            root = root,
            data = data,
            logs = logs,
            current = current,
            snapshots = snapshots,
        )
PATHS = ProjectPaths.build()
