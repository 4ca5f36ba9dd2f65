"""Load IIIF manifest JSON files into the manifest store."""

import argparse
import json
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

sys.path.append(str(Path(__file__).parent.parent))

from src import config, log
from src.config.database import NotificationsDB
from src.exceptions import ManifestImportError
from src.web.services.manifest_service import ManifestService


@dataclass
class ImportManifestsArgs:
    paths: list[Path]
    dry_run: bool


def iter_manifest_files(paths: Iterable[Path]) -> Iterator[Path]:
    """Yield JSON files from the given files and directories, sorted per directory."""
    for path in paths:
        if path.is_dir():
            yield from sorted(p for p in path.glob("*.json") if p.is_file())
        else:
            yield path


def load_manifest(path: Path) -> dict[str, Any]:
    """Read a manifest file and check it can be stored.

    Raises:
        ManifestImportError: If the file is unreadable, not JSON, or has no `@id`.
    """
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestImportError(f"Cannot read manifest '{path}': {e}") from e

    if not isinstance(document, dict):
        raise ManifestImportError(f"Manifest '{path}' is not a JSON object")
    at_id = document.get("@id")
    if not isinstance(at_id, str) or not at_id.strip():
        raise ManifestImportError(f"Manifest '{path}' is missing a string '@id'")
    return document


def import_manifests(
    paths: Iterable[Path], manifests: ManifestService | None, dry_run: bool = False
) -> tuple[int, int]:
    """Import every manifest found under `paths`.

    Args:
        paths (Iterable[Path]): Manifest files or directories of them.
        manifests (ManifestService | None): Target store; unused on a dry run.
        dry_run (bool): Only validate and log the files.

    Returns:
        tuple[int, int]: Number of imported and failed files.
    """
    imported = failed = 0
    for path in iter_manifest_files(paths):
        try:
            document = load_manifest(path)
            if dry_run or manifests is None:
                log.info(
                    f"ImportManifests: Would import $$'{document['@id']}'$$ "
                    f"from $$'{path}'$$"
                )
            else:
                manifests.upsert_manifest(document)
            imported += 1
        except ManifestImportError as e:
            log.error(f"ImportManifests: {e}")
            failed += 1
    return imported, failed


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Import IIIF manifest JSON files into the manifest store"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Manifest JSON files or directories containing them",
    )
    parser.add_argument(
        "--dry-run",
        "-d",
        action="store_true",
        help="Dry run, only validate the files and log what would be imported",
    )
    args = ImportManifestsArgs(**vars(parser.parse_args(argv)))

    manifests = None
    if not args.dry_run:
        manifests = ManifestService(
            NotificationsDB(config.data_path), config.manifest_base_url
        )

    imported, failed = import_manifests(args.paths, manifests, dry_run=args.dry_run)
    log.info(f"ImportManifests: Imported {imported} manifest(s), {failed} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
