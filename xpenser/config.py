import os
from dataclasses import dataclass
from typing import Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigurationError


DEFAULTS = {
    "base_url": "http://xpenser.com",
    "timeout": None,
}

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config", "xpenser.yml")


@dataclass(frozen=True)
class XpenserConfig:
    """xpenser API への接続設定（生成後は変更しない）"""

    username: str
    password: str
    base_url: str = DEFAULTS["base_url"]
    timeout: Optional[float] = None


def _load_yaml(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"{path} must contain a mapping")
    return cfg


def load_config(path: Optional[str] = None) -> XpenserConfig:
    """設定を読み込む

    優先順位: 環境変数（.env を含む） > config/xpenser.yml > DEFAULTS
    """
    load_dotenv()

    # shallow merge defaults
    merged = dict(DEFAULTS)
    merged.update(_load_yaml(path or DEFAULT_CONFIG_PATH))

    env_map = {
        "XPENSER_USERNAME": "username",
        "XPENSER_PASSWORD": "password",
        "XPENSER_BASE_URL": "base_url",
        "XPENSER_TIMEOUT": "timeout",
    }
    for env_name, key in env_map.items():
        value = os.getenv(env_name)
        if value:
            merged[key] = value

    if not merged.get("username") or not merged.get("password"):
        raise ConfigurationError("XPENSER_USERNAME and XPENSER_PASSWORD must be set")

    timeout = merged.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid timeout: {timeout!r}") from None

    return XpenserConfig(
        username=str(merged["username"]),
        password=str(merged["password"]),
        base_url=str(merged["base_url"]).rstrip("/"),
        timeout=timeout,
    )
