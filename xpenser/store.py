import json
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, List, Optional

from .dates import format_xpenser_date
from .models import ExpenseRecord


def _get_db_path() -> str:
    """経費ストアのDBパス。XPENSER_STORE_DB を呼び出しごとに参照する"""
    return os.getenv("XPENSER_STORE_DB", "xpenser_store.db")


@contextmanager
def _conn():
    con = sqlite3.connect(_get_db_path())
    con.execute("PRAGMA journal_mode=WAL;")
    try:
        yield con
        con.commit()
    finally:
        con.close()


def init_db():
    with _conn() as con:
        con.execute(
            """
            CREATE TABLE IF NOT EXISTS expenses (
              id TEXT PRIMARY KEY,
              doc_json TEXT,
              date TEXT,
              stored_at TEXT
            );
            """
        )


def save_expense(record: ExpenseRecord) -> str:
    """レコードを保存（同じIDは上書き）。IDがなければ採番してレコードにも書き戻す"""
    if record.id is None:
        record.id = uuid.uuid4().hex
    doc = record.to_document()
    with _conn() as con:
        con.execute(
            "INSERT OR REPLACE INTO expenses(id, doc_json, date, stored_at) VALUES (?,?,?,?)",
            (record.id, json.dumps(doc, ensure_ascii=False), doc["date"], datetime.utcnow().isoformat()),
        )
    return record.id


def save_expenses(records: Iterable[ExpenseRecord]) -> List[str]:
    return [save_expense(record) for record in records]


def get_expense(expense_id: str) -> Optional[ExpenseRecord]:
    with _conn() as con:
        cur = con.execute("SELECT doc_json FROM expenses WHERE id=?", (expense_id,))
        row = cur.fetchone()
        if not row:
            return None
        return ExpenseRecord.from_document(expense_id, json.loads(row[0]))


def list_expenses(since: Optional[str] = None) -> List[ExpenseRecord]:
    """保存済みレコードを日付順に返す。since 指定時はその日より後（APIの date_op=gt と同じ）"""
    with _conn() as con:
        if since is None:
            cur = con.execute("SELECT id, doc_json FROM expenses ORDER BY date, id")
        else:
            # date列は ISO 形式なので文字列比較で日付順になる
            cutoff = format_xpenser_date(since)
            cur = con.execute(
                "SELECT id, doc_json FROM expenses WHERE substr(date, 1, 10) > ? ORDER BY date, id",
                (cutoff,),
            )
        return [ExpenseRecord.from_document(expense_id, json.loads(doc_json)) for expense_id, doc_json in cur.fetchall()]


def delete_expense(expense_id: str) -> bool:
    with _conn() as con:
        cur = con.execute("DELETE FROM expenses WHERE id=?", (expense_id,))
        return cur.rowcount > 0
