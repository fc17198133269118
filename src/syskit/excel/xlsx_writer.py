# src/syskit/excel/xlsx_writer.py

"""
Minimal XLSX export.

Rows are streamed into the worksheet XML on disk (so large exports do not build
the sheet in memory), then packed with the fixed OOXML parts into a ZIP.
Every cell is an inline string; the header row uses style 1 (bold, colored).
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape, quoteattr
from zipfile import ZIP_DEFLATED, ZipFile

from ..errors import ExportError

logger = logging.getLogger(__name__)

_NS_MAIN = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
_NS_REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_NS_PKG_REL = "http://schemas.openxmlformats.org/package/2006/relationships"

# Characters not allowed in XML 1.0 documents.
_INVALID_XML = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f]")
_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")

CONTENT_TYPES_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/xl/workbook.xml" ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"/>
<Override PartName="/xl/worksheets/sheet1.xml" ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.worksheet+xml"/>
<Override PartName="/xl/styles.xml" ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.styles+xml"/>
</Types>"""

ROOT_RELS_XML = f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="{_NS_PKG_REL}">
<Relationship Id="rId1" Type="{_NS_REL}/officeDocument" Target="xl/workbook.xml"/>
</Relationships>"""

WORKBOOK_RELS_XML = f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="{_NS_PKG_REL}">
<Relationship Id="rId1" Type="{_NS_REL}/worksheet" Target="worksheets/sheet1.xml"/>
<Relationship Id="rId2" Type="{_NS_REL}/styles" Target="styles.xml"/>
</Relationships>"""


def _workbook_xml(sheet_name: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<workbook xmlns="{_NS_MAIN}" xmlns:r="{_NS_REL}">'
        f'<sheets><sheet name={quoteattr(sheet_name)} sheetId="1" r:id="rId1"/></sheets>'
        "</workbook>"
    )


def _styles_xml(title_bg: str, title_color: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<styleSheet xmlns="{_NS_MAIN}">'
        '<fonts count="2">'
        '<font><sz val="11"/><color rgb="FF000000"/><name val="Calibri"/></font>'
        f'<font><b/><sz val="11"/><color rgb="FF{title_color.upper()}"/><name val="Calibri"/></font>'
        "</fonts>"
        '<fills count="3">'
        '<fill><patternFill patternType="none"/></fill>'
        '<fill><patternFill patternType="gray125"/></fill>'
        f'<fill><patternFill patternType="solid"><fgColor rgb="FF{title_bg.upper()}"/>'
        '<bgColor indexed="64"/></patternFill></fill>'
        "</fills>"
        '<borders count="1"><border><left/><right/><top/><bottom/><diagonal/></border></borders>'
        '<cellStyleXfs count="1"><xf numFmtId="0" fontId="0" fillId="0" borderId="0"/></cellStyleXfs>'
        '<cellXfs count="2">'
        '<xf numFmtId="0" fontId="0" fillId="0" borderId="0" xfId="0"/>'
        '<xf numFmtId="0" fontId="1" fillId="2" borderId="0" xfId="0" applyFont="1" applyFill="1"/>'
        "</cellXfs>"
        "</styleSheet>"
    )


def column_letter(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA'."""
    out = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        out = chr(65 + rem) + out
    return out


def _cell(ref: str, value: Any, style: int | None = None) -> str:
    text = "" if value is None else str(value)
    text = _INVALID_XML.sub("", text)
    s_attr = f' s="{style}"' if style is not None else ""
    return f'<c r="{ref}" t="inlineStr"{s_attr}><is><t xml:space="preserve">{escape(text)}</t></is></c>'


def _row_values(row: Any, headers: Sequence[Any]) -> list[Any]:
    if isinstance(row, Mapping):
        return [row.get(h, "") for h in headers]
    values = list(row)
    return [values[i] if i < len(values) else "" for i in range(len(headers))]


def _write_sheet(fh, rows: Iterable[Any], headers: Sequence[Any]) -> int:
    fh.write(f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n<worksheet xmlns="{_NS_MAIN}"><sheetData>')

    fh.write('<row r="1">')
    for c, h in enumerate(headers):
        fh.write(_cell(f"{column_letter(c)}1", h, style=1))
    fh.write("</row>")

    n = 0
    for n, row in enumerate(rows, start=1):
        r = n + 1
        fh.write(f'<row r="{r}">')
        for c, value in enumerate(_row_values(row, headers)):
            fh.write(_cell(f"{column_letter(c)}{r}", value))
        fh.write("</row>")

    fh.write("</sheetData></worksheet>")
    return n


def export_rows(
        file_path: str | Path,
        rows: Sequence[Mapping[str, Any]] | Sequence[Sequence[Any]],
        headers: Sequence[Any] | None = None,
        *,
        title_bg: str = "071E40",
        title_color: str = "FFFFFF",
        sheet_name: str = "Data",
) -> bool:
    """
    Write `rows` to an .xlsx file.

    Headers default to the keys of the first row (mapping rows); sequence rows
    require explicit headers. Colors are 6-digit hex strings without '#'.
    """
    if not rows:
        raise ExportError("No data to export")

    if not headers:
        first = rows[0]
        if not isinstance(first, Mapping):
            raise ExportError("Headers are required when rows are not mappings")
        headers = list(first.keys())

    for color in (title_bg, title_color):
        if not _HEX_COLOR.match(color or ""):
            raise ExportError(f"Invalid hex color: {color!r}")

    out = Path(file_path)
    zip_tmp = out.with_name(f".{out.name}.tmp")
    sheet_tmp: str | None = None
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        fd, sheet_tmp = tempfile.mkstemp(prefix=f".{out.name}.", suffix=".sheet.xml", dir=out.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            count = _write_sheet(fh, rows, headers)

        with ZipFile(zip_tmp, "w", compression=ZIP_DEFLATED) as z:
            z.writestr("[Content_Types].xml", CONTENT_TYPES_XML)
            z.writestr("_rels/.rels", ROOT_RELS_XML)
            z.writestr("xl/workbook.xml", _workbook_xml(sheet_name[:31] or "Data"))
            z.writestr("xl/_rels/workbook.xml.rels", WORKBOOK_RELS_XML)
            z.writestr("xl/styles.xml", _styles_xml(title_bg, title_color))
            z.write(sheet_tmp, "xl/worksheets/sheet1.xml")
        os.replace(zip_tmp, out)
    except OSError as exc:
        raise ExportError(f"Could not write XLSX: {out}") from exc
    finally:
        if sheet_tmp is not None:
            Path(sheet_tmp).unlink(missing_ok=True)
        zip_tmp.unlink(missing_ok=True)

    logger.info("Exported %s rows to %s", count, out)
    return True
