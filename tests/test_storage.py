import json

from perfect_color.color_space import Color
from perfect_color.storage import LAST_COLOR_KEY, LastColorStore


def test_save_and_load(tmp_path):
    store = LastColorStore(tmp_path / "state.json")
    assert store.load() is None
    assert store.save(Color.from_hex("#1A2b3C"))
    assert json.loads((tmp_path / "state.json").read_text()) == {LAST_COLOR_KEY: "#1a2b3c"}
    assert store.load() == Color.from_hex("#1a2b3c")


def test_keeps_other_keys(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"theme": "dark"}))
    LastColorStore(path).save(Color.from_hex("#ffffff"))
    assert json.loads(path.read_text()) == {"theme": "dark", LAST_COLOR_KEY: "#ffffff"}


def test_write_failure_is_swallowed(tmp_path):
    # a directory where the file should be
    store = LastColorStore(tmp_path)
    assert store.save(Color.from_hex("#000000")) is False


def test_garbage_is_ignored(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")
    assert LastColorStore(path).load() is None
    path.write_text(json.dumps({LAST_COLOR_KEY: "#zzzzzz"}))
    assert LastColorStore(path).load() is None
