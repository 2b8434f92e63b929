"""
設定管理モジュール

関連クラス:
  - server.dependencies: この設定でロガー・TaskStoreを初期化
  - server.run: サーバー設定を使用
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "app_config.yaml"


@dataclass
class ServerConfig:
    """HTTPサーバー設定"""

    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """アプリケーション設定クラス"""

    server: ServerConfig = field(default_factory=ServerConfig)

    # ログ設定
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/task_tracker.log"

    # CORS許可オリジン
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # 起動時にサンプルタスクを投入するか
    seed_sample_data: bool = True

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時はconfig/app_config.yamlを使用）

        Returns:
            Config: 設定インスタンス（ファイルが無い場合はデフォルト値）
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        server_data = yaml_data.get("server", {})
        log_data = yaml_data.get("log", {})
        tasks_data = yaml_data.get("tasks", {})

        return cls(
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=int(server_data.get("port", 5000)),
                reload=bool(server_data.get("reload", False)),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/task_tracker.log"),
            cors_origins=list(server_data.get("cors_origins", ["*"])),
            seed_sample_data=bool(tasks_data.get("seed_sample_data", True)),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数から設定を読み込む"""
        origins = os.getenv("TASK_TRACKER_CORS_ORIGINS", "*")
        return cls(
            server=ServerConfig(
                host=os.getenv("TASK_TRACKER_HOST", "0.0.0.0"),
                port=int(os.getenv("TASK_TRACKER_PORT", "5000")),
                reload=_as_bool(os.getenv("TASK_TRACKER_RELOAD", "false")),
            ),
            log_level=os.getenv("TASK_TRACKER_LOG_LEVEL", "INFO"),
            log_file=os.getenv("TASK_TRACKER_LOG_FILE", "logs/task_tracker.log") or None,
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
            seed_sample_data=_as_bool(os.getenv("TASK_TRACKER_SEED_SAMPLE_DATA", "true")),
        )

    @classmethod
    def load(cls) -> "Config":
        """TASK_TRACKER_CONFIG で指定されたYAML、未指定なら既定のYAMLを読む"""
        env_path = os.getenv("TASK_TRACKER_CONFIG")
        return cls.from_yaml(Path(env_path) if env_path else None)
