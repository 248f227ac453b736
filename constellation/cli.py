"""
Constellation folder scanner: streaming JSON-over-stdout front end.

Emits newline-delimited JSON events:
  {"event":"progress", ...}   throttled snapshots while scanning
  {"event":"complete", ...}   the full scan result
  {"event":"cancelled", ...}  the scan was stopped (Ctrl-C)
  {"event":"error", ...}      the scan failed; exit status 1
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import List, Optional

from constellation.core.config.settings import settings
from constellation.features.folder_scan.domain.errors import ScanCancelledError, ScanError
from constellation.features.folder_scan.domain.models import ScanConfiguration, ScanProgress
from constellation.features.folder_scan.service.manager import ScanManager

logger = logging.getLogger("constellation.cli")

EXIT_FAILED = 1
EXIT_CANCELLED = 130


def emit(event: dict) -> None:
    try:
        sys.stdout.write(json.dumps(event) + "\n")
        sys.stdout.flush()
    except BrokenPipeError:
        # Parent process closed the pipe; nobody is listening any more.
        sys.exit(0)


def emit_progress(progress: ScanProgress) -> None:
    emit({"event": "progress", **progress.to_dict()})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="constellation", description="Constellation folder size scanner")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Scan a directory tree and print JSON events")
    scan.add_argument("root", help="Directory to scan")
    scan.add_argument("--max-depth", type=int, default=None, help="Folder node depth limit (<= 0: unlimited)")
    scan.add_argument("--follow-symlinks", action="store_true")
    scan.add_argument("--include-hidden", action="store_true")
    scan.add_argument("--include-system", action="store_true", help="Descend into OS-reserved directories")
    scan.add_argument("--files", action="store_true", help="Also emit per-file records")
    scan.add_argument("--concurrency", type=int, default=settings.SCAN_CONCURRENCY)
    scan.add_argument("--scan-id", default="")
    return parser


async def run_scan(args: argparse.Namespace, manager: Optional[ScanManager] = None) -> int:
    manager = manager or ScanManager()
    try:
        config = ScanConfiguration(
            root_path=args.root,
            max_depth=args.max_depth,
            follow_symlinks=args.follow_symlinks,
            include_hidden=args.include_hidden,
            include_system_dirs=args.include_system,
            include_files=args.files,
            concurrency=args.concurrency,
            scan_id=args.scan_id,
        )
    except ValueError as e:
        emit({"event": "error", "code": "invalid_configuration", "message": str(e)})
        return EXIT_FAILED

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, manager.cancel, config.scan_id)
    except (NotImplementedError, RuntimeError):
        # Windows event loops have no signal handlers; Ctrl-C falls back to KeyboardInterrupt.
        pass

    try:
        result = await manager.run(config, on_progress=emit_progress)
    except ScanCancelledError as e:
        emit({"event": "cancelled", "scanId": e.scan_id})
        return EXIT_CANCELLED
    except ScanError as e:
        emit({"event": "error", "code": e.code, "message": str(e)})
        return EXIT_FAILED
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass

    emit({"event": "complete", "result": result.to_dict()})
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "scan":
        return asyncio.run(run_scan(args))
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
