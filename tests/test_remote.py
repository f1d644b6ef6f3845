import shlex
import subprocess

import pytest

from core.exceptions import FetchError
from services import remote
from services.remote import execute_remote_command, list_remote_dir, scan_remote_dir

from conftest import BASIC_MODS_TOML


class FakeSSH:
    """Stands in for subprocess.run, answering ls/unzip from a dict."""

    def __init__(self, files: dict, listing_fails: bool = False):
        self.files = files
        self.listing_fails = listing_fails
        self.calls = []

    def __call__(self, argv, capture_output=False):
        self.calls.append(argv)
        # The remote shell re-splits the joined words
        ssh, host, *words = argv
        command, *args = shlex.split(" ".join(words))

        if command == "ls":
            if self.listing_fails:
                return subprocess.CompletedProcess(argv, 255, b"", b"ssh: connect to host failed")
            names = "\n".join(path.rsplit("/", 1)[1] for path in self.files) + "\n\n"
            return subprocess.CompletedProcess(argv, 0, names.encode(), b"")

        if command == "unzip":
            jar_path = args[1]
            content = self.files.get(jar_path)
            if content is None:
                return subprocess.CompletedProcess(argv, 11, b"", b"caution: filename not matched")
            return subprocess.CompletedProcess(argv, 0, content, b"")

        return subprocess.CompletedProcess(argv, 127, b"", b"command not found")


def test_execute_builds_ssh_argv(monkeypatch):
    fake = FakeSSH({})
    monkeypatch.setattr(remote.subprocess, "run", fake)

    execute_remote_command("mc-server", "ls", ["-1", "/srv/mods"])

    assert fake.calls == [["ssh", "mc-server", "ls", "-1", "/srv/mods"]]


def test_execute_nonzero_exit_raises(monkeypatch, caplog):
    monkeypatch.setattr(remote.subprocess, "run", FakeSSH({}))

    with pytest.raises(FetchError, match="exited with code 127"):
        execute_remote_command("mc-server", "frobnicate")
    assert "command not found" in caplog.text


def test_execute_missing_ssh_binary(monkeypatch):
    def boom(argv, capture_output=False):
        raise FileNotFoundError("ssh")

    monkeypatch.setattr(remote.subprocess, "run", boom)

    with pytest.raises(FetchError, match="cannot run"):
        execute_remote_command("mc-server", "ls")


def test_list_remote_dir_drops_blank_lines(monkeypatch):
    fake = FakeSSH({"/srv/mods/a.jar": b"", "/srv/mods/b.txt": b""})
    monkeypatch.setattr(remote.subprocess, "run", fake)

    assert list_remote_dir("mc-server", "/srv/mods") == ["a.jar", "b.txt"]


def test_scan_remote_dir(monkeypatch):
    fake = FakeSSH({
        "/srv/mods/endermod.jar": BASIC_MODS_TOML.encode(),
        "/srv/mods/kotlinforforge-4.12.0-all.jar": None,
        "/srv/mods/server.properties": b"",
    })
    monkeypatch.setattr(remote.subprocess, "run", fake)

    records = scan_remote_dir("mc-server", "/srv/mods")

    assert [r.file_name for r in records] == ["endermod.jar", "kotlinforforge-4.12.0-all.jar"]
    assert records[0].full_path == "/srv/mods/endermod.jar"
    assert records[0].mods[0].mod_id == "endermod"
    assert records[1].parsed_identity.name == "kotlinforforge"
    assert ["ssh", "mc-server", "unzip", "-p", "/srv/mods/endermod.jar", "META-INF/mods.toml"] in fake.calls


def test_scan_remote_dir_listing_failure(monkeypatch):
    monkeypatch.setattr(remote.subprocess, "run", FakeSSH({}, listing_fails=True))

    with pytest.raises(FetchError):
        scan_remote_dir("mc-server", "/srv/mods")


def test_execute_quotes_arguments_for_remote_shell(monkeypatch):
    fake = FakeSSH({})
    monkeypatch.setattr(remote.subprocess, "run", fake)

    execute_remote_command("mc-server", "ls", ["-1", "/srv/Minecraft Server/mods"])

    assert fake.calls == [["ssh", "mc-server", "ls", "-1", "'/srv/Minecraft Server/mods'"]]


def test_scan_remote_dir_with_spaces_and_shell_syntax(monkeypatch):
    fake = FakeSSH({
        "/srv/Minecraft Server/mods/Foo (1).jar": BASIC_MODS_TOML.encode(),
        "/srv/Minecraft Server/mods/$(reboot).jar": BASIC_MODS_TOML.encode(),
    })
    monkeypatch.setattr(remote.subprocess, "run", fake)

    records = scan_remote_dir("mc-server", "/srv/Minecraft Server/mods")

    assert [r.file_name for r in records] == ["Foo (1).jar", "$(reboot).jar"]
    assert all(r.mods and r.mods[0].mod_id == "endermod" for r in records)
    assert ["ssh", "mc-server", "unzip", "-p", "'/srv/Minecraft Server/mods/$(reboot).jar'",
            "META-INF/mods.toml"] in fake.calls
