# brgy_core/documents/excel.py
from __future__ import annotations

import io
from typing import Any, Dict, Iterable, Mapping, Union

import pandas as pd
from django.http import HttpResponse

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Excel refuses longer sheet names
MAX_SHEET_NAME = 31

SheetData = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def build_workbook(sheets: Dict[str, SheetData]) -> bytes:
    """
    One sheet per entry, in insertion order. Rows may be a DataFrame or a
    list of dicts (keys become the header row).
    """
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            df = rows if isinstance(rows, pd.DataFrame) else pd.DataFrame(list(rows))
            df.to_excel(writer, index=False, sheet_name=name[:MAX_SHEET_NAME])

            ws = writer.sheets[name[:MAX_SHEET_NAME]]
            for idx, col in enumerate(df.columns, start=1):
                width = max([len(str(col)), *(len(str(v)) for v in df[col].tolist())] or [10])
                ws.column_dimensions[ws.cell(row=1, column=idx).column_letter].width = min(width + 2, 60)
    return output.getvalue()


def excel_response(content: bytes, filename: str) -> HttpResponse:
    res = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
    res["Content-Disposition"] = f'attachment; filename="{filename}"'
    res["Content-Length"] = str(len(content))
    return res
