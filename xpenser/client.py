from typing import Dict, Iterable, List, Optional, Union
from urllib.parse import urlencode

import requests
from requests.auth import HTTPBasicAuth

from .config import XpenserConfig
from .dates import format_xpenser_date
from .errors import InvalidReportId, MalformedResponse, RemoteRequestFailure
from .models import ExpenseRecord, TagDictionary, records_from_response


class XpenserClient:
    """xpenser API クライアント

    認証情報は生成時の XpenserConfig で固定され、全リクエストで使い回す。
    リトライは行わず、エラーはそのまま呼び出し元に送出する。
    """

    def __init__(self, config: XpenserConfig):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.auth = HTTPBasicAuth(config.username, config.password)
        self.default_params = {"format": "json"}

    def _get(self, path: str, params: Optional[Dict] = None):
        url = f"{self.base_url}{path}"
        query = dict(self.default_params)
        if params:
            query.update(params)
        # report=* はエンコードせずそのまま送る
        query_string = urlencode(query, safe="*")

        try:
            response = requests.get(url, auth=self.auth, params=query_string, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            raise RemoteRequestFailure(f"Request to {url} failed: {e}", url=url) from e

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise RemoteRequestFailure(
                f"{response.status_code} error from {url}", status_code=response.status_code, url=url
            ) from e
        # 3xx などリダイレクトされずに返ってきた 2xx 以外も失敗扱い
        if not 200 <= response.status_code < 300:
            raise RemoteRequestFailure(
                f"Unexpected status {response.status_code} from {url}", status_code=response.status_code, url=url
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"Response from {url} is not valid JSON") from e

    def _get_list(self, path: str, params: Optional[Dict] = None) -> List:
        data = self._get(path, params)
        if not isinstance(data, list):
            raise MalformedResponse(f"Expected a list from {path}, got {type(data).__name__}")
        return data

    def fetch_default_report(self) -> List[Dict]:
        """デフォルトレポートの全経費を取得"""
        return self._get_list("/api/expenses/")

    def fetch_report(self, report_id: int) -> List[Dict]:
        """指定レポートの全経費を取得"""
        return self._get_list("/api/v1.0/expenses/", {"report": _report_id(report_id)})

    def fetch_all_reports(self) -> List[Dict]:
        """全レポートの全経費を取得"""
        return self._get_list("/api/v1.0/expenses/", {"report": "*"})

    def fetch_all_reports_since(self, date) -> List[Dict]:
        """全レポートから date より後（gt）の経費を取得。date はここで YYYY-MM-DD に正規化する"""
        params = {"report": "*", "date_op": "gt", "date": format_xpenser_date(date)}
        return self._get_list("/api/v1.0/expenses/", params)

    def fetch_records(self, report_id: Union[int, str, None] = None, since=None) -> List[ExpenseRecord]:
        """fetch_* の結果を ExpenseRecord に変換して返す

        report_id=None はデフォルトレポート、"*" は全レポート。since を渡すと全レポートを対象にする。
        """
        if since is not None:
            items = self.fetch_all_reports_since(since)
        elif report_id is None:
            items = self.fetch_default_report()
        elif report_id == "*":
            items = self.fetch_all_reports()
        else:
            items = self.fetch_report(report_id)
        return records_from_response(items)

    def fetch_all_tags(self) -> TagDictionary:
        """タグ一覧を取得し tag_id => tag_name の辞書にする

        各要素は id と name の2キーのみを持つこと。それ以外は MalformedResponse。
        """
        tags: TagDictionary = {}
        for row in self._get_list("/api/v1.0/tags/"):
            if not isinstance(row, dict) or set(row.keys()) != {"id", "name"}:
                raise MalformedResponse(f"Tag element must have exactly 'id' and 'name': {row!r}")
            tags[row["id"]] = row["name"]
        return tags

    @staticmethod
    def resolve_names(tag_ids: Iterable[int], tags: TagDictionary) -> List[str]:
        return resolve_tag_names(tag_ids, tags)


def resolve_tag_names(tag_ids: Iterable[int], tags: TagDictionary) -> List[str]:
    """タグIDの並びをタグ名に変換する

    tag_ids の順序と重複をそのまま保つ。辞書にないIDは出力しない。

    例:
        resolve_tag_names([93923], {93923: "Tag1", 84526: "Tag2"})  -> ["Tag1"]
        resolve_tag_names([1, 1], {1: "A"})                        -> ["A", "A"]
    """
    return [tags[tag_id] for tag_id in tag_ids if tag_id in tags]


def _report_id(report_id) -> int:
    if isinstance(report_id, bool):
        raise InvalidReportId(f"Invalid report id: {report_id!r}")
    try:
        return int(report_id)
    except (TypeError, ValueError):
        raise InvalidReportId(f"Invalid report id: {report_id!r}") from None
