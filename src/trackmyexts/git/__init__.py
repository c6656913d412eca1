"""Git access for the snapshot repository."""

from trackmyexts.git.history import GitHistory, Revision, parse_log
from trackmyexts.git.operations import GitOperations
from trackmyexts.git.repository import GitError, GitRepository, is_remote_url
from trackmyexts.git.status import FileStatus, GitStatus, GitStatusTool, parse_porcelain

__all__ = [
    "FileStatus",
    "GitError",
    "GitHistory",
    "GitOperations",
    "GitRepository",
    "GitStatus",
    "GitStatusTool",
    "Revision",
    "is_remote_url",
    "parse_log",
    "parse_porcelain",
]
