from sketchbox.paths import default_output_path, ensure_directories, get_data_root


def test_ensure_directories(tmp_path):
    dirs = ensure_directories(tmp_path)
    assert (tmp_path / "paint").exists()
    assert dirs["paint"] == tmp_path / "paint"


def test_default_output_path_lives_in_paint_dir(tmp_path):
    config = {"data_root": str(tmp_path / "root")}
    path = default_output_path(config)
    assert get_data_root(config) == (tmp_path / "root").resolve()
    assert path == (tmp_path / "root").resolve() / "paint" / "untitled.png"
    assert path.parent.exists()
