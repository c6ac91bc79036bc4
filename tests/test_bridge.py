import json

import pytest

from assethost.bridge import Commands
from assethost.saves import SaveStore


class Window:
    def __init__(self):
        self.opened = 0

    def open_devtools(self):
        self.opened += 1


@pytest.fixture
def commands(tmp_path, asset_root):
    return Commands(SaveStore(str(tmp_path / "saves")), str(asset_root))


def test_save_round_trip(commands):
    assert commands.dispatch("write_save", {"filename": "file1", "data": "A"}) == {"ok": True, "result": None}
    assert commands.dispatch("read_save", {"filename": "file1"}) == {"ok": True, "result": "A"}
    commands.dispatch("write_save", {"filename": "file2", "data": "B"})
    listed = commands.dispatch("list_saves")["result"]
    assert sorted(listed) == ["file1.rpgsave", "file2.rpgsave"]


def test_delete_then_read(commands):
    commands.write_save("file1", "A")
    assert commands.dispatch("delete_save", {"filename": "file1"})["ok"]
    assert commands.dispatch("read_save", {"filename": "file1"}) == {"ok": False, "error": "Save file not found"}
    assert commands.dispatch("delete_save", {"filename": "file1"})["ok"]


def test_file_exists(commands):
    assert commands.file_exists("data/System.json") is True
    assert commands.file_exists("data/Missing.json") is False
    assert commands.file_exists("bad\0path") is False


def test_read_game_file(commands):
    assert json.loads(commands.read_game_file("data/System.json")) == {"gameTitle": "Game"}
    assert commands.dispatch("read_game_file", {"filepath": "nope.json"}) == {"ok": False, "error": "File not found"}


def test_read_game_file_directory(commands):
    reply = commands.dispatch("read_game_file", {"filepath": "data"})
    assert reply["ok"] is False
    assert reply["error"].startswith("Failed to read file")


def test_show_dev_tools(tmp_path, asset_root):
    window = Window()
    with_window = Commands(SaveStore(str(tmp_path / "saves")), str(asset_root), window=window)
    assert with_window.dispatch("show_dev_tools") == {"ok": True, "result": None}
    assert window.opened == 1

    without = Commands(SaveStore(str(tmp_path / "saves")), str(asset_root))
    assert without.dispatch("show_dev_tools") == {"ok": False, "error": "Window not found"}


def test_unknown_command_and_bad_arguments(commands):
    assert commands.dispatch("format_disk") == {"ok": False, "error": "Unknown command: format_disk"}
    reply = commands.dispatch("read_save", {"name": "file1"})
    assert reply["ok"] is False
    assert reply["error"].startswith("Invalid arguments for read_save")


def test_dispatch_json(commands):
    reply = json.loads(commands.dispatch_json('{"id": 7, "command": "write_save", "args": {"filename": "g", "data": "x"}}'))
    assert reply == {"ok": True, "result": None, "id": 7}
    reply = json.loads(commands.dispatch_json('{"id": 8, "command": "read_save", "args": {"filename": "g"}}'))
    assert reply == {"ok": True, "result": "x", "id": 8}


@pytest.mark.parametrize("message", ["not json", "[]", '{"args": {}}', '{"command": "list_saves", "args": [1]}'])
def test_dispatch_json_rejects_bad_messages(commands, message):
    assert json.loads(commands.dispatch_json(message))["ok"] is False


@pytest.mark.parametrize("filename", ["5", "null", "[]"])
def test_non_text_arguments_are_rejected(commands, filename):
    message = '{"id": 3, "command": "read_save", "args": {"filename": %s}}' % filename
    reply = json.loads(commands.dispatch_json(message))
    assert reply["ok"] is False
    assert reply["error"] == "Invalid arguments for read_save: filename must be a string"
    assert reply["id"] == 3


def test_bad_write_keeps_existing_save(commands):
    commands.write_save("file1", "precious")
    reply = commands.dispatch("write_save", {"filename": "file1", "data": 5})
    assert reply["ok"] is False
    assert commands.read_save("file1") == "precious"
