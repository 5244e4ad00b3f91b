"""Export commits to an Excel workbook with a commits table and a summary."""

from __future__ import annotations

import os
import re
import zipfile
from collections.abc import Sequence
from pathlib import Path
from xml.sax.saxutils import escape

from gommits.git import GitError, gather_commits, get_repository_name, is_git_repo
from gommits.models import CommitInfo

_MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
_CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
_CT_PREFIX = "application/vnd.openxmlformats-officedocument.spreadsheetml."
_XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

HEADERS = ("Commit Hash", "Author Name", "Author Email", "Commit Date", "Commit Message", "Files Changed")
COMMIT_COLUMN_WIDTHS = (15, 20, 25, 18, 40, 35)
SUMMARY_COLUMN_WIDTHS = (20, 40)
TABLE_NAME = "CommitsTable"
TABLE_STYLE = "TableStyleMedium2"
MAX_QUICK_EXPORT = 50

# Indices into cellXfs in the generated stylesheet.
_STYLE_HEADER = 1
_STYLE_DATA = 2
_STYLE_TITLE = 3
_STYLE_LABEL = 4

_ILLEGAL_XML = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f]")


class ExcelExportError(Exception):
    """The workbook could not be written."""


def _text(value: str) -> str:
    return escape(_ILLEGAL_XML.sub("", value))


def _attr(value: str) -> str:
    return escape(_ILLEGAL_XML.sub("", value), {'"': "&quot;"})


def _column(index: int) -> str:
    return "ABCDEF"[index]


def _string_cell(ref: str, value: str, style: int = 0) -> str:
    style_attr = f' s="{style}"' if style else ""
    return (
        f'<c r="{ref}"{style_attr} t="inlineStr"><is>'
        f'<t xml:space="preserve">{_text(value)}</t></is></c>'
    )


def _number_cell(ref: str, value: int, style: int = 0) -> str:
    style_attr = f' s="{style}"' if style else ""
    return f'<c r="{ref}"{style_attr}><v>{value}</v></c>'


def _row(number: int, cells: Sequence[str]) -> str:
    return f'<row r="{number}">{"".join(cells)}</row>'


def _cols(widths: Sequence[float]) -> str:
    cols = "".join(
        f'<col min="{i}" max="{i}" width="{w}" customWidth="1"/>'
        for i, w in enumerate(widths, start=1)
    )
    return f"<cols>{cols}</cols>"


def _worksheet(widths, rows, selected: bool, with_table: bool) -> str:
    view = '<sheetView tabSelected="1" workbookViewId="0"/>' if selected else '<sheetView workbookViewId="0"/>'
    table = '<tableParts count="1"><tablePart r:id="rId1"/></tableParts>' if with_table else ""
    return (
        f'{_XML_DECL}<worksheet xmlns="{_MAIN_NS}" xmlns:r="{_REL_NS}">'
        f"<sheetViews>{view}</sheetViews>"
        '<sheetFormatPr defaultRowHeight="15"/>'
        f"{_cols(widths)}<sheetData>{''.join(rows)}</sheetData>{table}</worksheet>"
    )


def _files_text(commit: CommitInfo) -> str:
    return "\n".join(commit.files) if commit.files else "No files changed"


def _commits_sheet(commits: Sequence[CommitInfo]) -> str:
    rows = [_row(1, [_string_cell(f"{_column(i)}1", h, _STYLE_HEADER) for i, h in enumerate(HEADERS)])]
    for number, commit in enumerate(commits, start=2):
        values = (commit.hash, commit.author, commit.email, commit.date, commit.message, _files_text(commit))
        rows.append(
            _row(number, [_string_cell(f"{_column(i)}{number}", v, _STYLE_DATA) for i, v in enumerate(values)])
        )
    return _worksheet(COMMIT_COLUMN_WIDTHS, rows, selected=False, with_table=bool(commits))


def _summary_sheet(repo_name: str, total: int, repo_path: str) -> str:
    rows = [
        _row(1, [_string_cell("A1", "Repository Summary", _STYLE_TITLE)]),
        _row(2, [_string_cell("A2", "Repository Name:", _STYLE_LABEL), _string_cell("B2", repo_name)]),
        _row(3, [_string_cell("A3", "Total Commits:", _STYLE_LABEL), _number_cell("B3", total)]),
        _row(4, [_string_cell("A4", "Repository Path:", _STYLE_LABEL), _string_cell("B4", repo_path)]),
    ]
    return _worksheet(SUMMARY_COLUMN_WIDTHS, rows, selected=True, with_table=False)


def _table(row_count: int) -> str:
    ref = f"A1:F{row_count + 1}"
    columns = "".join(f'<tableColumn id="{i}" name="{_attr(h)}"/>' for i, h in enumerate(HEADERS, start=1))
    return (
        f'{_XML_DECL}<table xmlns="{_MAIN_NS}" id="1" name="{TABLE_NAME}" '
        f'displayName="{TABLE_NAME}" ref="{ref}"><autoFilter ref="{ref}"/>'
        f'<tableColumns count="{len(HEADERS)}">{columns}</tableColumns>'
        f'<tableStyleInfo name="{TABLE_STYLE}" showFirstColumn="0" showLastColumn="0" '
        'showRowStripes="1" showColumnStripes="0"/></table>'
    )


def _styles() -> str:
    thin = '<color rgb="FF000000"/>'
    border = "".join(f'<{side} style="thin">{thin}</{side}>' for side in ("left", "right", "top", "bottom"))
    return (
        f'{_XML_DECL}<styleSheet xmlns="{_MAIN_NS}">'
        '<fonts count="4">'
        '<font><sz val="11"/><name val="Calibri"/><family val="2"/></font>'
        '<font><b/><sz val="12"/><color rgb="FFFFFFFF"/><name val="Calibri"/><family val="2"/></font>'
        '<font><b/><sz val="14"/><name val="Calibri"/><family val="2"/></font>'
        '<font><b/><sz val="11"/><name val="Calibri"/><family val="2"/></font>'
        "</fonts>"
        '<fills count="3">'
        '<fill><patternFill patternType="none"/></fill>'
        '<fill><patternFill patternType="gray125"/></fill>'
        '<fill><patternFill patternType="solid"><fgColor rgb="FF4472C4"/><bgColor indexed="64"/></patternFill></fill>'
        "</fills>"
        '<borders count="2">'
        "<border><left/><right/><top/><bottom/><diagonal/></border>"
        f"<border>{border}<diagonal/></border>"
        "</borders>"
        '<cellStyleXfs count="1"><xf numFmtId="0" fontId="0" fillId="0" borderId="0"/></cellStyleXfs>'
        '<cellXfs count="5">'
        '<xf numFmtId="0" fontId="0" fillId="0" borderId="0" xfId="0"/>'
        '<xf numFmtId="0" fontId="1" fillId="2" borderId="1" xfId="0" applyFont="1" applyFill="1" '
        'applyBorder="1" applyAlignment="1"><alignment horizontal="center" vertical="center"/></xf>'
        '<xf numFmtId="0" fontId="0" fillId="0" borderId="1" xfId="0" applyBorder="1" '
        'applyAlignment="1"><alignment vertical="top" wrapText="1"/></xf>'
        '<xf numFmtId="0" fontId="2" fillId="0" borderId="0" xfId="0" applyFont="1"/>'
        '<xf numFmtId="0" fontId="3" fillId="0" borderId="0" xfId="0" applyFont="1"/>'
        "</cellXfs>"
        '<cellStyles count="1"><cellStyle name="Normal" xfId="0" builtinId="0"/></cellStyles>'
        "</styleSheet>"
    )


def _relationships(entries: Sequence[tuple[str, str, str]]) -> str:
    rels = "".join(
        f'<Relationship Id="{rid}" Type="{_REL_NS}/{kind}" Target="{target}"/>' for rid, kind, target in entries
    )
    return f'{_XML_DECL}<Relationships xmlns="{_PKG_REL_NS}">{rels}</Relationships>'


def _content_types(with_table: bool) -> str:
    overrides = [
        ("/xl/workbook.xml", "sheet.main+xml"),
        ("/xl/worksheets/sheet1.xml", "worksheet+xml"),
        ("/xl/worksheets/sheet2.xml", "worksheet+xml"),
        ("/xl/styles.xml", "styles+xml"),
    ]
    if with_table:
        overrides.append(("/xl/tables/table1.xml", "table+xml"))
    parts = "".join(f'<Override PartName="{name}" ContentType="{_CT_PREFIX}{kind}"/>' for name, kind in overrides)
    return (
        f'{_XML_DECL}<Types xmlns="{_CT_NS}">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        f"{parts}</Types>"
    )


def _workbook() -> str:
    return (
        f'{_XML_DECL}<workbook xmlns="{_MAIN_NS}" xmlns:r="{_REL_NS}">'
        '<bookViews><workbookView activeTab="1"/></bookViews>'
        '<sheets><sheet name="Commits" sheetId="1" r:id="rId1"/>'
        '<sheet name="Summary" sheetId="2" r:id="rId2"/></sheets></workbook>'
    )


def export_to_excel(commits: Sequence[CommitInfo], repo_path) -> Path:
    """Write ``<repo>_commits.xlsx`` into ``repo_path`` and return its path."""
    repo_path_text = os.fspath(repo_path)
    repo_name = get_repository_name(repo_path_text)
    full_path = Path(repo_path_text) / f"{repo_name}_commits.xlsx"
    with_table = len(commits) > 0

    parts = {
        "[Content_Types].xml": _content_types(with_table),
        "_rels/.rels": _relationships([("rId1", "officeDocument", "xl/workbook.xml")]),
        "xl/workbook.xml": _workbook(),
        "xl/_rels/workbook.xml.rels": _relationships(
            [
                ("rId1", "worksheet", "worksheets/sheet1.xml"),
                ("rId2", "worksheet", "worksheets/sheet2.xml"),
                ("rId3", "styles", "styles.xml"),
            ]
        ),
        "xl/styles.xml": _styles(),
        "xl/worksheets/sheet1.xml": _commits_sheet(commits),
        "xl/worksheets/sheet2.xml": _summary_sheet(repo_name, len(commits), repo_path_text),
    }
    if with_table:
        parts["xl/worksheets/_rels/sheet1.xml.rels"] = _relationships([("rId1", "table", "../tables/table1.xml")])
        parts["xl/tables/table1.xml"] = _table(len(commits))

    try:
        with zipfile.ZipFile(full_path, "w", zipfile.ZIP_DEFLATED) as archive:
            for name, content in parts.items():
                archive.writestr(name, content.encode("utf-8"))
    except OSError as exc:
        raise ExcelExportError(f"failed to save Excel file: {exc}") from exc
    return full_path


def write_excel(repo_path=".") -> Path | None:
    """Export up to 50 commits of the current branch, reporting problems on stdout."""
    if not is_git_repo(repo_path):
        print("Current directory is not a git repository")
        return None
    try:
        commits, _ = gather_commits(repo_path, "", "main", True)
    except GitError as exc:
        print(f"Error gathering commits: {exc}")
        return None
    try:
        return export_to_excel(commits[:MAX_QUICK_EXPORT], repo_path)
    except ExcelExportError as exc:
        print(f"Error creating Excel file: {exc}")
        return None