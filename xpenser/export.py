import csv
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Union

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .client import resolve_tag_names
from .models import ExpenseRecord, TagDictionary

CSV_FIELDS = ["id", "date", "amount", "category", "notes", "tags"]


def resolve_rows(records: Iterable[ExpenseRecord], tags: TagDictionary) -> List[Dict]:
    """レコードを出力用の行に変換（タグIDはタグ名に解決）。入力順を保つ"""
    rows = []
    for record in records:
        rows.append({
            "id": record.id or "",
            "date": record.date.strftime("%Y-%m-%d"),
            "amount": str(record.amount),
            "category": record.category,
            "notes": record.notes,
            "tags": ", ".join(resolve_tag_names(record.tags, tags)),
        })
    return rows


def write_csv(records: Iterable[ExpenseRecord], tags: TagDictionary, path: Union[str, Path]) -> Path:
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in resolve_rows(records, tags):
            writer.writerow(row)
    return path


def _latin1(text: str) -> str:
    # 標準フォントは Latin-1 のみ対応
    return text.encode("latin-1", "replace").decode("latin-1")


def write_pdf(records: Iterable[ExpenseRecord], tags: TagDictionary, path: Union[str, Path],
              title: str = "Expense Report") -> Path:
    """経費一覧のPDFを出力する（1件1行、最後に合計）"""
    path = Path(path)
    rows = resolve_rows(records, tags)

    pdf = FPDF()
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, _latin1(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(5)

    pdf.set_font("Helvetica", "", 10)
    if not rows:
        pdf.cell(0, 8, "No expenses", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    total = Decimal("0")
    for row in rows:
        total += Decimal(row["amount"])
        line = f"{row['date']}  {row['amount']:>10}  {row['category']}  {row['notes']}"
        if row["tags"]:
            line += f"  [{row['tags']}]"
        pdf.cell(0, 8, _latin1(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.ln(5)
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 10, f"Total: {total}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.output(str(path))
    return path
