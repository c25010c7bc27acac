from sketchbox.config import DEFAULT_CONFIG, load_config, paint_setting


def test_load_config_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("data_root: /tmp/data\npaint:\n  line_width: 9\n", encoding="utf-8")
    monkeypatch.setenv("SKETCHBOX_CONFIG", str(config_path))

    config = load_config()
    assert config["data_root"] == "/tmp/data"
    assert config["paint"]["line_width"] == 9
    assert config["paint"]["width"] == DEFAULT_CONFIG["paint"]["width"]

    monkeypatch.delenv("SKETCHBOX_CONFIG", raising=False)


def test_load_config_ignores_non_mapping_yaml(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("SKETCHBOX_CONFIG", str(config_path))

    config = load_config()
    assert config["paint"] == DEFAULT_CONFIG["paint"]


def test_paint_setting_falls_back_to_defaults():
    assert paint_setting({"paint": {"width": 10}}, "width") == 10
    assert paint_setting({}, "jpeg_quality") == DEFAULT_CONFIG["paint"]["jpeg_quality"]
