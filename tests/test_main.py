import unittest
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch

from xpenser.client import XpenserClient
from xpenser.errors import RemoteRequestFailure
from xpenser.main import main, sync
from xpenser.models import ExpenseRecord


class TestSync(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock(spec=XpenserClient)
        self.records = [
            ExpenseRecord(amount=Decimal("4.00"), date=datetime(2010, 8, 25), notes="Endicia.com",
                          tags=[1], category="Freight"),
        ]
        self.client.fetch_records.return_value = self.records
        self.client.fetch_all_tags.return_value = {1: "Shipping"}

    @patch("xpenser.main.store")
    def test_default_report_is_fetched_and_saved(self, mock_store):
        mock_store.save_expenses.return_value = ["id1"]

        result = sync(self.client)

        self.client.fetch_records.assert_called_once_with()
        mock_store.init_db.assert_called_once()
        mock_store.save_expenses.assert_called_once_with(self.records)
        self.assertEqual(result, {"fetched": 1, "saved": ["id1"], "tags": 1})

    @patch("xpenser.main.store")
    def test_since_takes_precedence(self, mock_store):
        sync(self.client, since="05/03/2010", dry_run=True)

        self.client.fetch_records.assert_called_once_with(since="05/03/2010")
        mock_store.save_expenses.assert_not_called()

    @patch("xpenser.main.store")
    def test_all_reports_and_single_report(self, mock_store):
        sync(self.client, all_reports=True, dry_run=True)
        self.client.fetch_records.assert_called_with(report_id="*")

        sync(self.client, report_id=12, dry_run=True)
        self.client.fetch_records.assert_called_with(report_id=12)

    @patch("xpenser.main.write_pdf")
    @patch("xpenser.main.write_csv")
    @patch("xpenser.main.store")
    def test_exports_use_resolved_tags(self, mock_store, mock_csv, mock_pdf):
        sync(self.client, csv_path="out.csv", pdf_path="out.pdf", dry_run=True)

        mock_csv.assert_called_once_with(self.records, {1: "Shipping"}, "out.csv")
        mock_pdf.assert_called_once_with(self.records, {1: "Shipping"}, "out.pdf")


class TestMain(unittest.TestCase):

    @patch("xpenser.main.sync")
    @patch("xpenser.main.XpenserClient")
    @patch("xpenser.main.load_config")
    def test_main_success(self, mock_load_config, mock_client_cls, mock_sync):
        mock_sync.return_value = {"fetched": 2, "saved": ["a", "b"], "tags": 0}

        code = main(["--report", "7", "--dry-run"])

        self.assertEqual(code, 0)
        mock_client_cls.assert_called_once_with(mock_load_config.return_value)
        kwargs = mock_sync.call_args.kwargs
        self.assertEqual(kwargs["report_id"], 7)
        self.assertTrue(kwargs["dry_run"])

    @patch("xpenser.main.sync")
    @patch("xpenser.main.XpenserClient")
    @patch("xpenser.main.load_config")
    def test_main_reports_library_errors(self, mock_load_config, mock_client_cls, mock_sync):
        mock_sync.side_effect = RemoteRequestFailure("401 error", status_code=401)

        self.assertEqual(main(["--all"]), 1)


if __name__ == "__main__":
    unittest.main()
