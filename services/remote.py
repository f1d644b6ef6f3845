"""
Remote mods directory scanning over SSH.

Each query is one blocking `ssh <host> <command> ...` run. Listing uses
`ls -1`, metadata comes from `unzip -p <jar> <entry>` on the remote side.
ssh hands its arguments to the remote shell as one line, so every argument
is shell-quoted.
"""
import logging
import posixpath
import shlex
import subprocess
from typing import Sequence

from core.exceptions import FetchError
from core.inventory import ArchiveRecord, build_inventory
from core.jar_name import ARCHIVE_SUFFIX
from core.mods_toml import MODS_TOML_ENTRY

logger = logging.getLogger(__name__)

DEFAULT_SSH_COMMAND = "ssh"


def execute_remote_command(
    host: str,
    command: str,
    args: Sequence[str] = (),
    ssh_command: str = DEFAULT_SSH_COMMAND
) -> bytes:
    """
    Run a command on a remote host and return its stdout.

    Args:
        host: SSH destination (host alias or user@host)
        command: Remote command name
        args: Remote command arguments, shell-quoted before sending
        ssh_command: Local ssh executable

    Raises:
        FetchError: ssh could not be started or the command exited non-zero
    """
    argv = [ssh_command, host, command, *(shlex.quote(arg) for arg in args)]

    try:
        result = subprocess.run(argv, capture_output=True)
    except OSError as e:
        raise FetchError(f"cannot run {ssh_command}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        logger.error(f"Run {command} in {host} failed, exit code = {result.returncode}")
        if stderr:
            logger.error(stderr)
        raise FetchError(f"{command} on {host} exited with code {result.returncode}")

    return result.stdout


def list_remote_dir(host: str, dir_path: str, ssh_command: str = DEFAULT_SSH_COMMAND) -> list[str]:
    """List entry names of a remote directory, blank lines dropped."""
    output = execute_remote_command(host, "ls", ["-1", dir_path], ssh_command)

    names = []
    for line in output.decode("utf-8", errors="replace").split("\n"):
        name = line.strip()
        if name:
            names.append(name)
    return names


def read_remote_metadata(
    host: str,
    jar_path: str,
    entry: str = MODS_TOML_ENTRY,
    ssh_command: str = DEFAULT_SSH_COMMAND
) -> bytes:
    """Read a metadata entry from a jar on the remote host."""
    return execute_remote_command(host, "unzip", ["-p", jar_path, entry], ssh_command)


def scan_remote_dir(
    host: str,
    dir_path: str,
    metadata_entry: str = MODS_TOML_ENTRY,
    ssh_command: str = DEFAULT_SSH_COMMAND,
    extension: str = ARCHIVE_SUFFIX
) -> list[ArchiveRecord]:
    """
    Build the inventory of a remote mods directory.

    A failed listing propagates as FetchError; failed per-jar fetches fall
    back to filename heuristics inside build_inventory.
    """
    logger.info(f"Scanning remote directory: {host}:{dir_path}")

    listing = [
        (name, posixpath.join(dir_path, name))
        for name in list_remote_dir(host, dir_path, ssh_command)
    ]

    return build_inventory(
        listing,
        lambda full_path: read_remote_metadata(host, full_path, metadata_entry, ssh_command),
        extension
    )
