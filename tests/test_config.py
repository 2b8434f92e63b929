"""設定読み込みのテスト"""

from pathlib import Path

from src.task_tracker.config import Config


def test_from_yaml_reads_sections(tmp_path: Path):
    config_path = tmp_path / "app_config.yaml"
    config_path.write_text(
        """
server:
  host: "127.0.0.1"
  port: 8080
  cors_origins: ["http://localhost:3000"]
log:
  level: "DEBUG"
  file: "logs/test.log"
tasks:
  seed_sample_data: false
""",
        encoding="utf-8",
    )

    config = Config.from_yaml(config_path)

    assert config.server.host == "127.0.0.1"
    assert config.server.port == 8080
    assert config.cors_origins == ["http://localhost:3000"]
    assert config.log_level == "DEBUG"
    assert config.log_file == "logs/test.log"
    assert config.seed_sample_data is False


def test_from_yaml_missing_file_uses_defaults(tmp_path: Path):
    config = Config.from_yaml(tmp_path / "missing.yaml")
    assert config.server.port == 5000
    assert config.seed_sample_data is True


def test_from_env(monkeypatch):
    monkeypatch.setenv("TASK_TRACKER_PORT", "9000")
    monkeypatch.setenv("TASK_TRACKER_CORS_ORIGINS", "http://a.example, http://b.example")
    monkeypatch.setenv("TASK_TRACKER_SEED_SAMPLE_DATA", "false")

    config = Config.from_env()

    assert config.server.port == 9000
    assert config.cors_origins == ["http://a.example", "http://b.example"]
    assert config.seed_sample_data is False


def test_load_honours_config_env(monkeypatch, tmp_path: Path):
    config_path = tmp_path / "custom.yaml"
    config_path.write_text("log:\n  level: WARNING\n", encoding="utf-8")
    monkeypatch.setenv("TASK_TRACKER_CONFIG", str(config_path))

    assert Config.load().log_level == "WARNING"
