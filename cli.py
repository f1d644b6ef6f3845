# Modsync v1.0.2
#!/usr/bin/env python3
"""
Modsync CLI

Command-line interface for reconciling a local mods directory with the
mods directory of a remote server.
"""
import argparse
import json
import logging
import sys
import time

from config import DEFAULT_CONFIG_PATH, Settings, load_settings
from core import (
    ConfigError,
    FetchError,
    MetadataParseError,
    parse_jar_name,
    parse_mod_metadata,
    reconcile
)

SEPARATOR = "=" * 60
SUB_SEPARATOR = "-" * 40

logger = logging.getLogger(__name__)


class Color:
    """ANSI color codes."""
    RESET = "\x1b[0m"
    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    BRIGHT_RED = "\x1b[1;31m"
    BRIGHT_GREEN = "\x1b[1;32m"
    BRIGHT_YELLOW = "\x1b[1;33m"


class Painter:
    """Wraps text in ANSI colors when enabled."""

    def __init__(self, enabled: bool):
        self.enabled = enabled

    def __call__(self, text: str, color: str) -> str:
        if not self.enabled:
            return text
        return f"{color}{text}{Color.RESET}"


def _section(paint: Painter, title: str, color: str):
    print(paint(title, color))
    print(SUB_SEPARATOR)


def _record_label(record) -> str:
    """Describe how an archive was identified."""
    if record.mods:
        return ", ".join(f"{m.mod_id} (v{m.version})" for m in record.mods)
    if record.parsed_identity:
        identity = record.parsed_identity
        version = f" (v{identity.version})" if identity.version else ""
        return f"{identity.name}{version} [from filename]"
    return "no identity"


def print_report(report, paint: Painter):
    """Render a ReconciliationReport as colored sections."""
    print(SEPARATOR)
    _section(paint, f"Matched ({report.match_count})", Color.BRIGHT_GREEN)
    for match in report.matches:
        color = Color.GREEN if match.is_exact else Color.YELLOW
        percent = f"{match.similarity * 100:5.1f}%"
        print(f"  {paint(percent, color)}  {match.local.file_name}  <->  {match.remote.file_name}")
    print()

    _section(paint, f"Only local ({len(report.unmatched_local)})", Color.BRIGHT_RED)
    for record in report.unmatched_local:
        print(f"  {paint(record.file_name, Color.RED)}  {_record_label(record)}")
    print()

    _section(paint, f"Only remote ({len(report.unmatched_remote)})", Color.BRIGHT_YELLOW)
    for record in report.unmatched_remote:
        print(f"  {paint(record.file_name, Color.YELLOW)}  {_record_label(record)}")
    print(SEPARATOR)

    if report.is_fully_matched:
        print(paint("✅ Local and remote mods are in sync", Color.BRIGHT_GREEN))
    else:
        total = len(report.unmatched_local) + len(report.unmatched_remote)
        print(paint(f"⚠️  {total} archive(s) without a counterpart", Color.BRIGHT_YELLOW))


def print_inventory(records):
    """Print one line per declared mod, flagging fallbacks."""
    print(f"\nFound {len(records)} mods:")
    for i, record in enumerate(records, start=1):
        if record.mods:
            for mod in record.mods:
                print(f"Mod {i}: {mod.display_name} (v{mod.version})")
        elif record.parsed_identity:
            print(f"Mod {i}: {_record_label(record)}  <{record.file_name}>")
        else:
            print(f"Mod {i}: ??? {record.file_name} (no identity)")


def _require_remote(settings: Settings):
    if settings.remote is None:
        raise ConfigError("[remote] section with host and path is required for this command")
    return settings.remote


def scan_local(settings: Settings):
    from services.local import scan_local_dir

    return scan_local_dir(settings.local.path, settings.METADATA_ENTRY, settings.ARCHIVE_EXTENSION)


def scan_remote(settings: Settings):
    from services.remote import scan_remote_dir

    remote = _require_remote(settings)
    return scan_remote_dir(
        remote.host,
        remote.path,
        settings.METADATA_ENTRY,
        settings.SSH_COMMAND,
        settings.ARCHIVE_EXTENSION
    )


def compare(settings: Settings, as_json: bool = False, color: bool = True):
    """Scan both sides, reconcile and print the report."""
    remote = _require_remote(settings)
    if not as_json:
        print(f"Scan Local Dir: {settings.local.path}")
        print(f"Scan Remote Dir: {remote.host}:{remote.path}")
    local_records = scan_local(settings)
    remote_records = scan_remote(settings)

    report = reconcile(local_records, remote_records, settings.FUZZY_MATCH_THRESHOLD)

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report, Painter(color))
    return report


def parse_names(names: list[str]):
    for name in names:
        identity = parse_jar_name(name)
        print(f"{name}")
        print(f"  Name:    {identity.name or '(empty)'}")
        print(f"  Version: {identity.version or 'N/A'}")


def inspect_jar(jar_path: str, entry: str):
    """Print the parsed mods.toml of a local jar."""
    from services.local import read_local_metadata

    metadata = parse_mod_metadata(read_local_metadata(jar_path, entry))

    print(f"\n{jar_path}")
    print("-" * 60)
    print(f"  Loader:  {metadata.mod_loader} {metadata.loader_version}")
    print(f"  License: {metadata.license}")
    for mod in metadata.mods:
        print(f"  [{mod.mod_id}] {mod.display_name} v{mod.version}")
        if mod.authors:
            print(f"    Authors: {mod.authors}")
        print(f"    {mod.description.strip()}")


def show_config(settings: Settings):
    print("Local:")
    print(f"  path: {settings.local.path}")
    print("Remote:")
    if settings.remote:
        print(f"  host: {settings.remote.host}")
        print(f"  path: {settings.remote.path}")
    else:
        print("  (not configured)")
    print(f"Metadata entry:  {settings.METADATA_ENTRY}")
    print(f"Fuzzy threshold: {settings.FUZZY_MATCH_THRESHOLD}")


def watch_local(settings: Settings, color: bool = True):
    """Reconcile now and again on every local jar change."""
    from services.watcher import ModsDirectoryWatcher

    def on_change(path: str):
        print(f"\n📁 Changed: {path}")
        compare(settings, color=color)

    compare(settings, color=color)

    print(f"\nWatching directory: {settings.local.path}")
    print("Press Ctrl+C to stop\n")

    watcher = ModsDirectoryWatcher(settings.local.path, on_change, settings.ARCHIVE_EXTENSION)
    watcher.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping watcher...")
        watcher.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconcile local and remote Minecraft mod directories",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="Config file (TOML)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show progress logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # compare
    compare_parser = subparsers.add_parser("compare", help="Compare local and remote mods")
    compare_parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    compare_parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    # scan-local / scan-remote
    subparsers.add_parser("scan-local", help="List the local mods inventory")
    subparsers.add_parser("scan-remote", help="List the remote mods inventory")

    # parse-name
    name_parser = subparsers.add_parser("parse-name", help="Guess mod identity from jar filenames")
    name_parser.add_argument("names", nargs="+", help="Jar filenames")

    # inspect
    inspect_parser = subparsers.add_parser("inspect", help="Show mods.toml of a local jar")
    inspect_parser.add_argument("jar", help="Path to the jar")

    # watch
    watch_parser = subparsers.add_parser("watch", help="Compare again whenever local jars change")
    watch_parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    # show-config
    subparsers.add_parser("show-config", help="Print the effective configuration")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.command == "parse-name":
        parse_names(args.names)
        return

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if (args.verbose or settings.DEBUG) else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(f"Loaded config {args.config}")

    color = settings.COLOR and sys.stdout.isatty() and not getattr(args, "no_color", False)

    try:
        if args.command == "compare":
            compare(settings, args.json, color)
        elif args.command == "scan-local":
            print(f"Scan Local Dir: {settings.local.path}")
            print_inventory(scan_local(settings))
        elif args.command == "scan-remote":
            remote = _require_remote(settings)
            print(f"Scan Remote Dir: {remote.host}:{remote.path}")
            print_inventory(scan_remote(settings))
        elif args.command == "inspect":
            inspect_jar(args.jar, settings.METADATA_ENTRY)
        elif args.command == "watch":
            watch_local(settings, color)
        elif args.command == "show-config":
            show_config(settings)
    except (FileNotFoundError, FetchError, MetadataParseError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
