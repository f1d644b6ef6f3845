import zipfile
from pathlib import Path

import pytest

from core.inventory import ArchiveRecord
from core.jar_name import HeuristicIdentity
from core.mods_toml import MODS_TOML_ENTRY, ModDescriptor


BASIC_MODS_TOML = '''modLoader="javafml"
loaderVersion="[47,)"
license="MIT"
[[mods]]
modId="endermod"
version="1.0.0"
displayName="Enderman Balls Mod"
description=\'\'\'Enderman Balls Mod, cut the balls, chaos ensues.\'\'\'
authors="Emre"
'''


def mods_toml_for(mod_id: str, version: str = "1.0.0") -> str:
    return (
        'modLoader="javafml"\n'
        'loaderVersion="[47,)"\n'
        'license="MIT"\n'
        '[[mods]]\n'
        f'modId="{mod_id}"\n'
        f'version="{version}"\n'
        f'displayName="{mod_id}"\n'
        'description="test mod"\n'
    )


def make_record(file_name: str, mod_ids=(), name=None) -> ArchiveRecord:
    mods = tuple(
        ModDescriptor(mod_id=m, version="1.0.0", display_name=m, description="")
        for m in mod_ids
    )
    identity = HeuristicIdentity(name=name) if name is not None else None
    return ArchiveRecord(
        file_name=file_name,
        full_path=f"/mods/{file_name}",
        mods=mods,
        parsed_identity=identity
    )


@pytest.fixture
def make_jar(tmp_path: Path):
    """Write a jar into tmp_path/<folder>, optionally with a mods.toml entry."""
    def _make(name: str, mods_toml=None, folder: str = "mods") -> Path:
        mods_dir = tmp_path / folder
        mods_dir.mkdir(exist_ok=True)
        jar = mods_dir / name
        with zipfile.ZipFile(jar, "w") as zf:
            zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
            if mods_toml is not None:
                zf.writestr(MODS_TOML_ENTRY, mods_toml)
        return jar

    return _make
