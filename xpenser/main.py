import argparse
import os
import sys
from datetime import datetime
from typing import Dict, List, Optional

from . import store
from .client import XpenserClient
from .config import load_config
from .errors import XpenserError
from .export import write_csv, write_pdf
from .models import ExpenseRecord


def fetch_expenses(client: XpenserClient, report_id: Optional[int] = None, all_reports: bool = False,
                   since: Optional[str] = None) -> List[ExpenseRecord]:
    """取得対象の指定に応じて経費レコードを取得"""
    if since:
        print(f"全レポートから {since} より後の経費を取得中...")
        return client.fetch_records(since=since)
    if all_reports:
        print("全レポートの経費を取得中...")
        return client.fetch_records(report_id="*")
    if report_id is not None:
        print(f"レポート {report_id} の経費を取得中...")
        return client.fetch_records(report_id=report_id)
    print("デフォルトレポートの経費を取得中...")
    return client.fetch_records()


def sync(client: XpenserClient, report_id: Optional[int] = None, all_reports: bool = False,
         since: Optional[str] = None, csv_path: Optional[str] = None, pdf_path: Optional[str] = None,
         dry_run: bool = False) -> Dict:
    """取得 → タグ解決 → 保存 → エクスポート"""
    records = fetch_expenses(client, report_id=report_id, all_reports=all_reports, since=since)
    print(f"{len(records)}件の経費を取得しました")

    tags = client.fetch_all_tags()
    print(f"{len(tags)}件のタグを取得しました")

    saved_ids = []
    if dry_run:
        print("\n*** DRY_RUNモード: ストアへの保存は行いません ***\n")
    elif records:
        store.init_db()
        saved_ids = store.save_expenses(records)
        print(f"💾 {len(saved_ids)}件をストアに保存しました")

    if csv_path:
        write_csv(records, tags, csv_path)
        print(f"📄 CSVを出力しました: {csv_path}")
    if pdf_path:
        write_pdf(records, tags, pdf_path)
        print(f"📄 PDFを出力しました: {pdf_path}")

    return {"fetched": len(records), "saved": saved_ids, "tags": len(tags)}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="xpenser の経費を取得して保存・出力する")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--report", type=int, help="取得するレポートID")
    source.add_argument("--all", action="store_true", help="全レポートを取得")
    source.add_argument("--since", help="この日付より後の経費を全レポートから取得 (例: 2010-05-03, 05/03/2010)")
    parser.add_argument("--csv", help="CSVの出力先")
    parser.add_argument("--pdf", help="PDFの出力先")
    parser.add_argument("--dry-run", action="store_true", help="ストアに保存しない")
    parser.add_argument("--config", help="設定ファイル (既定: config/xpenser.yml)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    dry_run = args.dry_run or os.getenv("DRY_RUN", "false").lower() == "true"

    print("=== xpenser 経費同期を開始します ===")
    print(f"実行時刻: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    try:
        client = XpenserClient(load_config(args.config))
        result = sync(
            client,
            report_id=args.report,
            all_reports=args.all,
            since=args.since,
            csv_path=args.csv,
            pdf_path=args.pdf,
            dry_run=dry_run,
        )
    except XpenserError as e:
        print(f"\n❌ エラー: {e}")
        return 1

    print("\n=== 処理完了 ===")
    print(f"  取得: {result['fetched']}件")
    print(f"  保存: {len(result['saved'])}件")
    return 0


if __name__ == "__main__":
    sys.exit(main())
