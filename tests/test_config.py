import yaml

from finance_client import config


def test_load_config_merges_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("FINANCE_API_URL", raising=False)
    monkeypatch.delenv("FINANCE_SUGGEST_DELAY_MS", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"api_url": "https://finance.example.com", "suggestions": {"min_length": 4}}))

    cfg = config.load_config(path)

    assert cfg["api_url"] == "https://finance.example.com"
    assert cfg["suggestions"] == {"min_length": 4, "delay_ms": 500}
    assert cfg["exchange"]["base"] == "BRL"


def test_missing_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("FINANCE_API_URL", raising=False)
    cfg = config.load_config(tmp_path / "absent.yaml")
    assert cfg["api_url"] == "http://localhost:3001"
    assert config.suggestion_delay(cfg) == 0.5


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("FINANCE_API_URL", "http://other:9000")
    monkeypatch.setenv("FINANCE_SUGGEST_DELAY_MS", "250")
    monkeypatch.setenv("FINANCE_SESSION_FILE", str(tmp_path / "s.json"))

    cfg = config.load_config(tmp_path / "absent.yaml")

    assert cfg["api_url"] == "http://other:9000"
    assert config.suggestion_delay(cfg) == 0.25
    assert config.session_path(cfg) == tmp_path / "s.json"


def test_save_and_reload(tmp_path, monkeypatch):
    monkeypatch.delenv("FINANCE_API_URL", raising=False)
    path = tmp_path / "nested" / "config.yaml"
    cfg = config.load_config(path)
    cfg["reports"]["trend_months"] = 12
    config.save_config(cfg, path)
    assert config.load_config(path)["reports"]["trend_months"] == 12


def test_defaults_are_not_shared(tmp_path):
    cfg = config.load_config(tmp_path / "absent.yaml")
    cfg["suggestions"]["delay_ms"] = 1
    assert config.DEFAULT_CONFIG["suggestions"]["delay_ms"] == 500
