# gommits

A small terminal application that finds the commits made by one author in a
Git repository, shows them on screen and exports them to an Excel workbook.
The same building blocks can be used from Python, including a CSV export.

## Installation

```
pip install .
```

Git must be installed and on your `PATH`; every repository query runs `git`.

## Running

```
gommits
```

The command takes no options other than `--help`. It opens a full-screen
interface that walks through a few screens:

1. **Home** – press `Enter` to start.
2. **Directory** – type the path to a Git repository (an empty value means the
   current directory). `Tab` fills in `.`.
3. **Author** – type an author name or e-mail address; it is passed to
   `git log --author`, so partial matches work. An empty value is refused.
4. **Options** – type the maximum number of commits (`0` for no limit), then:
   - `Tab` toggles "current branch only". When on, only the commits between the
     merge base with the parent branch and the current branch are listed (or the
     whole current branch if the parent branch cannot be found); when off, all
     refs are searched.
   - `Alt+Tab` toggles whether changed files are shown.
   - `p` edits the parent branch; `Enter` confirms it. The default is detected
     from the repository: the first of `main`, `master`, `trunk`, `development`,
     `dev` that exists locally or under `origin/`, else the remote's HEAD branch,
     else the first local branch, else `main`.
   - `Enter` fetches the commits.
5. **Results** – shows up to five commits (fewer on a short terminal) with
   their hash, author, date, message (cut to 60 characters) and up to three
   changed files. `Enter` exports them to `<repository>_commits.xlsx` in the
   repository directory; a short notice confirms the export or reports its
   failure.

`b` goes back one screen from any screen but Home, and `Esc` or `Ctrl+C`
quits. The letters are read as commands even while typing in a field, so `b`
(and `p` on the Options screen) cannot be typed into a value.

## The workbook

The exported file has two sheets:

- **Commits** – one row per commit with hash, author name, author e-mail, date,
  message and the changed files (one per line, or "No files changed"), laid out
  as a styled table named `CommitsTable`.
- **Summary** – the repository name, the total number of commits and the
  repository path. This sheet is the one shown when the file is opened.

The repository name is the last part of the `origin` remote's URL without
`.git`, or the directory name when there is no remote.

## Using it from Python

```python
from gommits.git import gather_commits, detect_default_branch
from gommits.csv_export import export_to_csv
from gommits.excel import export_to_excel

repo = "/path/to/repo"
commits, branch = gather_commits(repo, "alice@example.com", detect_default_branch(repo), True)

export_to_csv(commits, "commits.csv")       # one row per changed file
path = export_to_excel(commits, repo)       # returns the path of <repo name>_commits.xlsx
```

- `gommits.git` also offers `is_git_repo`, `get_current_branch`,
  `get_repository_name` and `get_changed_files`. Failures from Git raise
  `gommits.git.GitError`.
- `gommits.csv_export.export_to_csv` writes the columns `commit_hash`,
  `author_name`, `author_email`, `commit_date`, `commit_message`, `file_path`;
  a commit without files gets one row with an empty path.
- `gommits.excel.export_to_excel` raises `gommits.excel.ExcelExportError` when
  the file cannot be written. `gommits.excel.write_excel(repo_path)` exports up
  to 50 commits of the current branch (compared against `main`, any author)
  and prints problems instead of raising.
- `gommits.state.AppState` holds the interface state; `AppState.update(msg)`
  applies one message (such as a `KeyMsg`) and returns the commands to carry
  out. `gommits.render.render_view(state)` turns a state into screen text.

## What it does not do

The interactive interface exports only to Excel; CSV export is available from
Python alone. Exports are always written into the repository directory, and the
command cannot be run non-interactively.

## Tests

```
pip install ".[test]"
pytest
```