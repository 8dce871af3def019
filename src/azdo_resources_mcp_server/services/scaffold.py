"""Scaffold content: turn a local directory into a single commit push."""

import base64
import logging
import os
from pathlib import Path

from ..errors import ScaffoldReadError
from ..models.api import Change, GitCommitRef, GitPush, GitRefUpdate, GitRefUpdateResult

logger = logging.getLogger(__name__)

SCAFFOLD_COMMIT_MESSAGE = "Scaffolding content"


def destination_path(root_path: str, relative_path: str) -> str:
    """Path of a scaffold file inside the repository."""
    return f"{root_path.rstrip('/')}/{relative_path}"


def collect_scaffold_changes(content_dir: str, root_path: str = "", branch_name: str | None = None) -> list[Change]:
    """
    Walk a directory and build one "add" change per regular file.

    Files are visited in sorted order so the resulting commit is stable.
    Directories never produce a change of their own.

    Args:
        content_dir: Local directory to copy into the repository
        root_path: Destination prefix inside the repository
        branch_name: Branch being scaffolded, used for error context

    Returns:
        List of add changes with base64 encoded content

    Raises:
        ScaffoldReadError if the directory cannot be walked or a file cannot be read
    """
    root = Path(content_dir)

    def _context(message: str, path: str, cause: Exception) -> ScaffoldReadError:
        return ScaffoldReadError(
            message,
            path=path,
            operation="scaffold",
            resource_type="git_branch",
            resource_id=branch_name,
            cause=cause,
        )

    def _on_walk_error(error: OSError) -> None:
        raise _context(f"Error walking scaffold directory {error.filename}", str(error.filename), error) from error

    if not root.is_dir():
        raise _context(
            f"Scaffold content {content_dir} is not a directory",
            content_dir,
            NotADirectoryError(content_dir),
        )

    changes = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            file_path = Path(dirpath) / filename
            if not file_path.is_file():
                continue
            try:
                data = file_path.read_bytes()
            except OSError as e:
                raise _context(f"Error reading scaffold file {file_path}", str(file_path), e) from e
            try:
                relative = file_path.relative_to(root).as_posix()
            except ValueError as e:
                raise _context(f"Error computing relative path of {file_path}", str(file_path), e) from e

            changes.append(
                Change.add(destination_path(root_path, relative), base64.b64encode(data).decode("ascii"))
            )

    logger.debug("Collected %d scaffold files from %s", len(changes), content_dir)
    return changes


def build_scaffold_push(ref_result: GitRefUpdateResult, changes: list[Change]) -> GitPush:
    """One push: the just-created ref as base, one commit with every change."""
    return GitPush(
        ref_updates=[GitRefUpdate(name=ref_result.name, old_object_id=ref_result.new_object_id)],
        commits=[GitCommitRef(comment=SCAFFOLD_COMMIT_MESSAGE, changes=changes)],
    )
