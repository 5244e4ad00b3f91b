"""Queries against a git repository through the ``git`` command."""

from __future__ import annotations

import os
import subprocess

from gommits.models import CommitInfo

_LOG_FORMAT = "--pretty=format:%H|%an|%ae|%ad|%s"
_DEFAULT_BRANCH_CANDIDATES = ("main", "master", "trunk", "development", "dev")


class GitError(Exception):
    """A git command could not be run or exited with an error."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


def _run_git(path: str | os.PathLike[str], *args: str) -> str:
    cmd = ["git", "-C", os.fspath(path), *args]
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise GitError(f"cannot run git: {exc}") from exc
    output = (result.stdout or "").strip()
    if result.returncode != 0:
        raise GitError(
            f"git {' '.join(args)} failed with exit status {result.returncode}",
            output=output,
        )
    return output


def _ref_exists(path, ref: str) -> bool:
    try:
        _run_git(path, "rev-parse", "--verify", ref)
    except GitError:
        return False
    return True


def _base_name(path) -> str:
    text = os.fspath(path)
    if not text:
        return "."
    trimmed = text.rstrip(os.sep)
    if not trimmed:
        return os.sep
    return trimmed.rsplit(os.sep, 1)[-1]


def is_git_repo(path) -> bool:
    """Return True if ``path`` lies inside a git work tree."""
    try:
        return _run_git(path, "rev-parse", "--is-inside-work-tree") == "true"
    except GitError:
        return False


def get_current_branch(path) -> str:
    """Return the name of the checked-out branch."""
    return _run_git(path, "rev-parse", "--abbrev-ref", "HEAD")


def get_repository_name(path) -> str:
    """Name the repository after its origin URL, else after its directory."""
    try:
        url = _run_git(path, "remote", "get-url", "origin").strip()
    except GitError:
        return _base_name(path)
    if url.endswith(".git"):
        url = url[:-4]
    name = url.rsplit("/", 1)[-1]
    if name:
        return name
    return _base_name(path)


def _commit_range(path, current_branch: str, parent_branch: str) -> str:
    if not _ref_exists(path, parent_branch):
        if _ref_exists(path, "origin/" + parent_branch):
            parent_branch = "origin/" + parent_branch
        else:
            return current_branch
    try:
        merge_base = _run_git(path, "merge-base", current_branch, parent_branch)
    except GitError:
        return current_branch
    return f"{merge_base}..{current_branch}"


def _parse_commits(path, output: str) -> list[CommitInfo]:
    commits = []
    for line in output.split("\n"):
        if not line:
            continue
        parts = line.split("|", 4)
        if len(parts) < 5:
            continue
        commit_hash, author, email, date, message = parts
        commits.append(
            CommitInfo(
                hash=commit_hash,
                author=author,
                email=email,
                date=date,
                message=message,
                files=get_changed_files(path, commit_hash),
            )
        )
    return commits


def gather_commits(path, author: str, parent_branch: str, current_branch_only: bool):
    """Collect commits by ``author``; return ``(commits, current_branch)``.

    With ``current_branch_only`` only commits since the merge base with
    ``parent_branch`` are taken, otherwise commits of all refs.
    """
    current_branch = get_current_branch(path)
    args = ["log", _LOG_FORMAT, "--author=" + author]
    if current_branch_only:
        args.append(_commit_range(path, current_branch, parent_branch))
    else:
        args.append("--all")
    output = _run_git(path, *args)
    return _parse_commits(path, output), current_branch


def get_changed_files(path, commit_hash: str) -> list[str]:
    """Return the paths changed by a commit."""
    output = _run_git(path, "show", "--name-only", "--pretty=", commit_hash)
    if not output:
        return []
    return output.split("\n")


def detect_default_branch(path) -> str:
    """Guess the branch that feature branches are compared against."""
    for branch in _DEFAULT_BRANCH_CANDIDATES:
        if _ref_exists(path, branch):
            return branch
        if _ref_exists(path, "origin/" + branch):
            return "origin/" + branch

    try:
        remote = _run_git(path, "remote", "show", "origin")
    except GitError:
        remote = None
    if remote is not None:
        for line in remote.split("\n"):
            line = line.strip()
            if line.startswith("HEAD branch:"):
                return line.split(":", 1)[1].strip()

    try:
        branches = _run_git(path, "branch")
    except GitError:
        branches = ""
    if branches:
        first = branches.split("\n")[0]
        if first.startswith("*"):
            first = first[1:]
        first = first.strip()
        if first:
            return first

    return "main"