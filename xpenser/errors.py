"""xpenser クライアントの例外定義"""

from typing import Optional


class XpenserError(Exception):
    """xpenser パッケージの全例外の基底クラス"""


class ConfigurationError(XpenserError):
    """認証情報や設定値が不足・不正な場合"""


class InvalidDateFormat(XpenserError, ValueError):
    """日付を YYYY-MM-DD 形式に変換できない場合"""


class MalformedResponse(XpenserError, ValueError):
    """APIレスポンスが想定した形をしていない場合"""


class RemoteRequestFailure(XpenserError):
    """通信エラー、または 2xx 以外のステータスが返った場合"""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class InvalidReportId(XpenserError, ValueError):
    """レポートIDが整数として解釈できない場合"""
