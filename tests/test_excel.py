import subprocess
import xml.etree.ElementTree as ET
import zipfile

import pytest

from gommits.excel import ExcelExportError, export_to_excel, write_excel
from gommits.models import CommitInfo

MAIN = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
NS = {"m": MAIN}


def fake_git(log_output="", origin="git@example.com:team/widget.git", repo=True, log_ok=True):
    def run(cmd, **kwargs):
        args = cmd[3:]
        if args == ["rev-parse", "--is-inside-work-tree"]:
            result = (0, "true") if repo else (128, "fatal")
        elif args == ["rev-parse", "--abbrev-ref", "HEAD"]:
            result = (0, "main")
        elif args == ["rev-parse", "--verify", "main"]:
            result = (0, "x")
        elif args[0] == "merge-base":
            result = (0, "base")
        elif args[0] == "log":
            result = (0, log_output) if log_ok else (128, "fatal")
        elif args[0] == "show":
            result = (0, "file.txt")
        elif args[:2] == ["remote", "get-url"] and origin is not None:
            result = (0, origin)
        else:
            result = (128, "fatal")
        return subprocess.CompletedProcess(cmd, result[0], stdout=result[1])

    return run


def cells(archive, name):
    root = ET.fromstring(archive.read(name))
    out = {}
    for cell in root.iter(f"{{{MAIN}}}c"):
        text = cell.find("m:is/m:t", NS)
        value = cell.find("m:v", NS)
        out[cell.get("r")] = (text if text is not None else value).text
    return out


def sample_commits():
    return [
        CommitInfo("h1", "Alice", "alice@example.com", "Mon", "first <&>", ["a.py", "b.py"]),
        CommitInfo("h2", "Bob", "bob@example.com", "Tue", "second", []),
    ]


def test_export_writes_named_workbook(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", fake_git())
    path = export_to_excel(sample_commits(), tmp_path)
    assert path == tmp_path / "widget_commits.xlsx"
    assert zipfile.is_zipfile(path)


def test_commits_sheet_contents(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", fake_git())
    path = export_to_excel(sample_commits(), tmp_path)
    with zipfile.ZipFile(path) as archive:
        sheet = cells(archive, "xl/worksheets/sheet1.xml")
        workbook = ET.fromstring(archive.read("xl/workbook.xml"))
    names = [s.get("name") for s in workbook.iter(f"{{{MAIN}}}sheet")]
    assert names == ["Commits", "Summary"]
    assert [sheet[f"{c}1"] for c in "ABCDEF"] == [
        "Commit Hash", "Author Name", "Author Email", "Commit Date", "Commit Message", "Files Changed",
    ]
    assert sheet["A2"] == "h1"
    assert sheet["E2"] == "first <&>"
    assert sheet["F2"] == "a.py\nb.py"
    assert sheet["F3"] == "No files changed"
    assert "A4" not in sheet


def test_table_spans_header_and_commits(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", fake_git())
    path = export_to_excel(sample_commits(), tmp_path)
    with zipfile.ZipFile(path) as archive:
        table = ET.fromstring(archive.read("xl/tables/table1.xml"))
    assert table.get("name") == "CommitsTable"
    assert table.get("ref") == "A1:F3"
    style = table.find("m:tableStyleInfo", NS)
    assert style.get("name") == "TableStyleMedium2"
    assert style.get("showRowStripes") == "1"


def test_no_table_without_commits(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", fake_git())
    path = export_to_excel([], tmp_path)
    with zipfile.ZipFile(path) as archive:
        names = archive.namelist()
        summary = cells(archive, "xl/worksheets/sheet2.xml")
    assert "xl/tables/table1.xml" not in names
    assert summary["B3"] == "0"


def test_summary_sheet(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", fake_git())
    path = export_to_excel(sample_commits(), tmp_path)
    with zipfile.ZipFile(path) as archive:
        summary = cells(archive, "xl/worksheets/sheet2.xml")
    assert summary["A1"] == "Repository Summary"
    assert summary["B2"] == "widget"
    assert summary["B3"] == "2"
    assert summary["B4"] == str(tmp_path)


def test_name_falls_back_to_directory(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", fake_git(origin=None))
    repo = tmp_path / "project"
    repo.mkdir()
    assert export_to_excel([], repo).name == "project_commits.xlsx"


def test_unwritable_location_raises(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", fake_git())
    with pytest.raises(ExcelExportError):
        export_to_excel(sample_commits(), tmp_path / "missing")


def test_write_excel_outside_repository(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(subprocess, "run", fake_git(repo=False))
    assert write_excel(tmp_path) is None
    assert "Current directory is not a git repository" in capsys.readouterr().out


def test_write_excel_reports_gather_errors(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(subprocess, "run", fake_git(log_ok=False))
    assert write_excel(tmp_path) is None
    assert capsys.readouterr().out.startswith("Error gathering commits:")


def test_write_excel_caps_commit_count(monkeypatch, tmp_path):
    log = "\n".join(f"h{i}|Dev|dev@example.com|Mon|change {i}" for i in range(60))
    monkeypatch.setattr(subprocess, "run", fake_git(log_output=log))
    path = write_excel(tmp_path)
    with zipfile.ZipFile(path) as archive:
        summary = cells(archive, "xl/worksheets/sheet2.xml")
        sheet = cells(archive, "xl/worksheets/sheet1.xml")
    assert summary["B3"] == "50"
    assert sheet["A51"] == "h49"
    assert "A52" not in sheet