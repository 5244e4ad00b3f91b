"""Export commits as CSV, one row per changed file."""

from __future__ import annotations

import csv
import os
from collections.abc import Iterable

from gommits.models import CommitInfo

HEADER = ("commit_hash", "author_name", "author_email", "commit_date", "commit_message", "file_path")


def _rows(commits: Iterable[CommitInfo]):
    for commit in commits:
        base = (commit.hash, commit.author, commit.email, commit.date, commit.message)
        for file_path in commit.files or [""]:
            yield (*base, file_path)


def export_to_csv(commits: Iterable[CommitInfo], csv_path: str | os.PathLike[str]) -> None:
    """Write ``commits`` to ``csv_path``; commits without files get one empty-path row."""
    with open(csv_path, "w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerow(HEADER)
        writer.writerows(_rows(commits))