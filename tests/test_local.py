import struct
import zipfile

import pytest

from core.exceptions import FetchError
from core.matching import reconcile
from core.mods_toml import MODS_TOML_ENTRY
from services.local import list_local_dir, read_local_metadata, scan_local_dir

from conftest import BASIC_MODS_TOML, mods_toml_for


def test_read_local_metadata(make_jar):
    jar = make_jar("endermod.jar", BASIC_MODS_TOML)
    assert read_local_metadata(str(jar)) == BASIC_MODS_TOML.encode("utf-8")


def test_read_missing_entry(make_jar):
    jar = make_jar("plain.jar")
    with pytest.raises(FetchError, match="not found"):
        read_local_metadata(str(jar))


def test_read_corrupt_archive(tmp_path):
    jar = tmp_path / "corrupt.jar"
    jar.write_bytes(b"this is not a zip")
    with pytest.raises(FetchError):
        read_local_metadata(str(jar))


def test_list_local_dir_skips_directories(tmp_path):
    (tmp_path / "a.jar").write_bytes(b"")
    (tmp_path / "sub.jar").mkdir()

    assert list_local_dir(str(tmp_path)) == ["a.jar"]


def test_list_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_local_dir(str(tmp_path / "nope"))


def test_scan_local_dir(make_jar, tmp_path):
    make_jar("endermod-1.0.0.jar", BASIC_MODS_TOML)
    make_jar("1.20.1-maid_storage_manager-1.14.5-all.jar")
    (tmp_path / "mods" / "readme.txt").write_text("hi")

    records = scan_local_dir(str(tmp_path / "mods"))

    by_name = {r.file_name: r for r in records}
    assert set(by_name) == {"endermod-1.0.0.jar", "1.20.1-maid_storage_manager-1.14.5-all.jar"}
    assert by_name["endermod-1.0.0.jar"].mods[0].mod_id == "endermod"
    assert by_name["endermod-1.0.0.jar"].full_path == str((tmp_path / "mods" / "endermod-1.0.0.jar").resolve())
    fallback = by_name["1.20.1-maid_storage_manager-1.14.5-all.jar"]
    assert fallback.parsed_identity.name == "maid_storage_manager"
    assert fallback.parsed_identity.version == "1.14.5"


def test_structured_records_match_despite_filenames(make_jar, tmp_path):
    make_jar("a-totally-unrelated-name.jar", mods_toml_for("create", "0.5.1"))
    make_jar("Q.jar", mods_toml_for("create", "0.5.2"), folder="server")

    local = scan_local_dir(str(tmp_path / "mods"))
    remote = scan_local_dir(str(tmp_path / "server"))
    report = reconcile(local, remote)

    assert report.match_count == 1
    assert report.matches[0].similarity == 1.0
    assert report.is_fully_matched


def corrupt_deflate_stream(jar, entry=MODS_TOML_ENTRY):
    """Overwrite the start of an entry's compressed data."""
    with zipfile.ZipFile(jar) as zf:
        offset = zf.getinfo(entry).header_offset
    data = bytearray(jar.read_bytes())
    name_len, extra_len = struct.unpack("<HH", data[offset + 26:offset + 30])
    start = offset + 30 + name_len + extra_len
    data[start:start + 8] = b"\xff" * 8
    jar.write_bytes(bytes(data))


def test_read_corrupt_compressed_entry(tmp_path):
    jar = tmp_path / "broken-1.2.3.jar"
    with zipfile.ZipFile(jar, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(MODS_TOML_ENTRY, BASIC_MODS_TOML * 4)
    corrupt_deflate_stream(jar)

    with pytest.raises(FetchError, match="cannot read"):
        read_local_metadata(str(jar))


def test_scan_survives_corrupt_compressed_entry(make_jar, tmp_path):
    make_jar("endermod-1.0.0.jar", BASIC_MODS_TOML)
    jar = tmp_path / "mods" / "broken-1.2.3.jar"
    with zipfile.ZipFile(jar, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(MODS_TOML_ENTRY, BASIC_MODS_TOML * 4)
    corrupt_deflate_stream(jar)

    records = scan_local_dir(str(tmp_path / "mods"))

    by_name = {r.file_name: r for r in records}
    assert set(by_name) == {"endermod-1.0.0.jar", "broken-1.2.3.jar"}
    broken = by_name["broken-1.2.3.jar"]
    assert broken.mods == ()
    assert broken.parsed_identity.name == "broken"
    assert broken.parsed_identity.version == "1.2.3"
