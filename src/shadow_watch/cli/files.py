import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from shadow_watch.config.settings import get_configuration_manager
from shadow_watch.logging.logger import get_logger
from shadow_watch.utils.file_filter import (
    get_language_from_extension,
    should_analyze_file,
    should_exclude_file,
    should_skip_directory,
)

logger = get_logger(__name__)
console = Console()


def find_analyzable_files(workspace: Path, exclude_patterns: List[str]) -> List[str]:
    """
    Walk a workspace and collect the files worth analyzing.

    Returns:
        Workspace-relative paths with forward slashes, sorted
    """
    found = []
    for dirpath, dirnames, filenames in os.walk(workspace):
        dirnames[:] = [d for d in dirnames if not should_skip_directory(d)]
        for filename in filenames:
            relative = (Path(dirpath) / filename).relative_to(workspace).as_posix()
            if should_analyze_file(relative) and not should_exclude_file(
                relative, exclude_patterns
            ):
                found.append(relative)
    return sorted(found)


class FilesCommands:
    """Commands for inspecting which files would be analyzed."""

    def list(self, workspace: Optional[str] = None) -> None:
        """
        List analyzable files of a workspace.

        Args:
            workspace: Workspace root. Defaults to the current directory.
        """
        root = Path(workspace or os.getcwd())
        config = get_configuration_manager()

        files = find_analyzable_files(root, config.exclude_patterns)
        if not files:
            console.print("No analyzable files found")
            return

        for relative in files:
            language = get_language_from_extension(Path(relative).suffix)
            console.print(f"{escape(relative)} [dim]({language})[/dim]")

        logger.info(f"Found {len(files)} analyzable files in {root}")
