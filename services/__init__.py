# Modsync v1.0.1
"""
Services package for Modsync.
Contains local and remote directory scanning and the mods directory watcher.
"""
from services.local import list_local_dir, read_local_metadata, scan_local_dir
from services.remote import (
    execute_remote_command,
    list_remote_dir,
    read_remote_metadata,
    scan_remote_dir
)
from services.watcher import ModsDirectoryWatcher, JarFileHandler

__all__ = [
    "list_local_dir",
    "read_local_metadata",
    "scan_local_dir",
    "execute_remote_command",
    "list_remote_dir",
    "read_remote_metadata",
    "scan_remote_dir",
    "ModsDirectoryWatcher",
    "JarFileHandler"
]
