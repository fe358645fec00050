from pathlib import Path

from kymotools.setup_directories import get_output_path, setup_output_directories


def test_setup_output_directories_creates_all(tmp_path):
    dirs = setup_output_directories(tmp_path)

    expected = {"base", "kymographs", "montages", "logs"}

    assert set(dirs.keys()) == expected

    for path in dirs.values():
        assert isinstance(path, Path)
        assert path.exists()
        assert path.is_dir()


def test_setup_output_directories_is_idempotent(tmp_path):
    dirs1 = setup_output_directories(tmp_path)
    dirs2 = setup_output_directories(tmp_path)

    assert dirs1 == dirs2


def test_nested_base_is_created(tmp_path):
    dirs = setup_output_directories(tmp_path / "a" / "b")

    assert dirs["base"] == (tmp_path / "a" / "b").resolve()
    assert dirs["montages"].exists()


def test_get_output_path_uses_mode_and_stem(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert get_output_path(dirs, "kymograph", "/data/movie.nc") == dirs["kymographs"] / "movie_kymograph.nc"
    assert get_output_path(dirs, "montage", "movie.nc") == dirs["montages"] / "movie_montage.nc"
