from __future__ import annotations
"""Command-line front door for s3-dirfs.

Builds an :class:`S3Filesystem` from a saved profile or explicit
connection flags, then lists, prints or stats paths inside the bucket.
The ``profile`` commands save connections for later runs.
"""

import argparse
import logging
import sys
from typing import Callable, Sequence, TextIO

from .errors import S3FilesystemError
from .filesystem import S3Filesystem
from .profiles import ConnectionProfile, ProfileStorage
from .settings import SettingsStorage
from .ui_utils import format_entry, format_last_modified, format_size

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

FilesystemFactory = Callable[[argparse.Namespace], S3Filesystem]


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-dirfs",
        description="Browse an S3 bucket as a read-only directory tree.",
    )
    parser.add_argument("--profile", help="saved connection profile to use")
    parser.add_argument("--bucket", help="bucket name (overrides the profile)")
    parser.add_argument("--endpoint-url", help="S3-compatible endpoint URL")
    parser.add_argument("--access-key", help="access key id")
    parser.add_argument("--secret-key", help="secret access key")
    parser.add_argument("--region", help="region name")
    parser.add_argument("--page-size", type=_positive_int, help="keys requested per listing call")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="increase log verbosity")

    commands = parser.add_subparsers(dest="command", required=True)

    ls_cmd = commands.add_parser("ls", help="list a directory")
    ls_cmd.add_argument("path", nargs="?", default=".")
    ls_cmd.add_argument("-l", "--long", action="store_true", help="show mode, size and modification time")
    ls_cmd.add_argument(
        "--batch",
        type=_positive_int,
        default=None,
        help="read entries in batches of this size instead of all at once",
    )

    cat_cmd = commands.add_parser("cat", help="print a file")
    cat_cmd.add_argument("path")

    stat_cmd = commands.add_parser("stat", help="show metadata of a file or directory")
    stat_cmd.add_argument("path")

    tree_cmd = commands.add_parser("tree", help="walk a directory recursively")
    tree_cmd.add_argument("path", nargs="?", default=".")

    profile_cmd = commands.add_parser("profile", help="manage saved connection profiles")
    profile_actions = profile_cmd.add_subparsers(dest="profile_command", required=True)
    add_cmd = profile_actions.add_parser(
        "add",
        help="save the connection flags (--bucket, --endpoint-url, ...) under a name",
    )
    add_cmd.add_argument("name")
    add_cmd.add_argument("--default", action="store_true", help="use this profile when --profile is omitted")
    profile_actions.add_parser("list", help="show saved profiles")
    return parser


def filesystem_from_args(
    args: argparse.Namespace,
    *,
    profiles: ProfileStorage | None = None,
    settings: SettingsStorage | None = None,
) -> S3Filesystem:
    app_settings = (settings or SettingsStorage()).load()
    profile_name = args.profile or app_settings.default_profile
    params = {
        "bucket": "",
        "endpoint_url": None,
        "access_key": None,
        "secret_key": None,
        "region_name": None,
    }
    if profile_name:
        profile = (profiles or ProfileStorage()).get(profile_name)
        params.update(
            bucket=profile.bucket,
            endpoint_url=profile.endpoint_url or None,
            access_key=profile.access_key or None,
            secret_key=profile.secret_key or None,
            region_name=profile.region_name or None,
        )
    overrides = {
        "bucket": args.bucket,
        "endpoint_url": args.endpoint_url,
        "access_key": args.access_key,
        "secret_key": args.secret_key,
        "region_name": args.region,
    }
    params.update({key: value for key, value in overrides.items() if value})
    if not params["bucket"]:
        raise ValueError("a bucket is required (use --bucket or --profile)")

    bucket = params.pop("bucket")
    return S3Filesystem.connect(bucket, page_size=args.page_size or app_settings.page_size, **params)


def run_ls(fs: S3Filesystem, args: argparse.Namespace, out: TextIO) -> None:
    with fs.open(args.path) as node:
        if args.batch is None:
            entries, _ = node.read_entries(-1)
            for entry in entries:
                out.write(format_entry(entry, long=args.long) + "\n")
            return
        done = False
        while not done:
            entries, done = node.read_entries(args.batch)
            for entry in entries:
                out.write(format_entry(entry, long=args.long) + "\n")


def run_cat(fs: S3Filesystem, args: argparse.Namespace, out: TextIO) -> None:
    sink = getattr(out, "buffer", None)
    with fs.open(args.path) as node:
        while True:
            chunk = node.read(CHUNK_SIZE)
            if not chunk:
                break
            if sink is not None:
                sink.write(chunk)
            else:
                out.write(chunk.decode("utf-8", errors="replace"))
    out.flush()


def run_stat(fs: S3Filesystem, args: argparse.Namespace, out: TextIO) -> None:
    info = fs.stat(args.path)
    out.write(f"name: {info.name}\n")
    out.write(f"type: {'directory' if info.is_dir else 'file'}\n")
    out.write(f"mode: {oct(info.mode)}\n")
    out.write(f"size: {format_size(info.size)}\n")
    out.write(f"modified: {format_last_modified(info.last_modified)}\n")


def run_tree(fs: S3Filesystem, args: argparse.Namespace, out: TextIO) -> None:
    for dir_path, _dirs, files in fs.walk(args.path):
        out.write(f"{dir_path}/\n")
        for name in files:
            out.write(f"  {name}\n")


def run_profile(
    args: argparse.Namespace,
    out: TextIO,
    *,
    profiles: ProfileStorage | None = None,
    settings: SettingsStorage | None = None,
) -> None:
    profiles = profiles or ProfileStorage()
    settings = settings or SettingsStorage()
    app_settings = settings.load()
    saved = profiles.load()

    if args.profile_command == "list":
        for profile in saved:
            marker = "*" if profile.name == app_settings.default_profile else " "
            endpoint = profile.endpoint_url or "-"
            out.write(f"{marker} {profile.name}  {profile.bucket}  {endpoint}\n")
        return

    if not args.bucket:
        raise ValueError("a bucket is required to save a profile (use --bucket)")
    profile = ConnectionProfile(
        name=args.name,
        bucket=args.bucket,
        endpoint_url=args.endpoint_url or "",
        access_key=args.access_key or "",
        secret_key=args.secret_key or "",
        region_name=args.region or "",
    )
    profiles.save([existing for existing in saved if existing.name != profile.name] + [profile])
    if args.default or args.page_size:
        if args.default:
            app_settings.default_profile = profile.name
        if args.page_size:
            app_settings.page_size = args.page_size
        settings.save(app_settings)
    out.write(f"saved profile '{profile.name}'\n")


COMMANDS = {
    "ls": run_ls,
    "cat": run_cat,
    "stat": run_stat,
    "tree": run_tree,
}


def main(
    argv: Sequence[str] | None = None,
    *,
    filesystem_factory: FilesystemFactory | None = None,
    profiles: ProfileStorage | None = None,
    settings: SettingsStorage | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    out = out or sys.stdout
    err = err or sys.stderr

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "profile":
            run_profile(args, out, profiles=profiles, settings=settings)
        else:
            if filesystem_factory is not None:
                fs = filesystem_factory(args)
            else:
                fs = filesystem_from_args(args, profiles=profiles, settings=settings)
            COMMANDS[args.command](fs, args, out)
    except (S3FilesystemError, ValueError) as exc:
        LOGGER.debug("Command '%s' failed", args.command, exc_info=True)
        err.write(f"error: {exc}\n")
        return 1
    return 0
