from colorcorner.config import load_config


def test_load_config_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("data_root: /tmp/data\neditor:\n  color: '#FF0000'\n", encoding="utf-8")
    monkeypatch.setenv("COLORCORNER_CONFIG", str(config_path))

    config = load_config()
    assert config["data_root"] == "/tmp/data"
    assert config["editor"]["color"] == "#FF0000"
    assert config["editor"]["max_history"] == 50

    monkeypatch.delenv("COLORCORNER_CONFIG", raising=False)


def test_load_config_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv("COLORCORNER_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    config = load_config()
    assert config["editor"]["debounce_ms"] == 300
    assert config["editor"]["tolerance"] == 30
