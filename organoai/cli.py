"""Command-line interface: scan images, save results and browse the scan history.

Configuration comes from config.yaml, .env and the environment; see
organoai.config for the variables.
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from .config import load_settings
from .core.capture import FileCamera, PathGallery
from .core.diseases import format_diseases
from .core.models import ScanRecord, ScanResult
from .errors import OrganoAIError
from .services import create_capture_store, create_document_store, create_orchestrator
from .storage.disease_db import DiseaseLookup
from .storage.scan_store import ScanRecordStore

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff", ".tif"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def collect_images(paths: list[str]) -> list[Path]:
    """Expand files and directories into a sorted list of image files."""
    images = []
    for p in paths:
        path = Path(p)
        if path.is_dir():
            images.extend(
                sorted(f for f in path.rglob("*") if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS)
            )
        elif path.is_file():
            images.append(path)
        else:
            print(f"Warning: {path} does not exist")
    return images


def ask_yes_no(question: str) -> bool:
    while True:
        response = input(f"{question} [y/N] ").strip().lower()
        if response in ("y", "yes", "s", "si", "sí"):
            return True
        if response in ("n", "no", ""):
            return False
        print("Please enter 'y' or 'n'")


class ConsolePresenter:
    """Prints pipeline output to the terminal."""

    def __init__(self, interactive: bool = True):
        self.interactive = interactive

    def show_message(self, text: str) -> None:
        tqdm.write(text)

    def show_results(self, results: list[ScanResult]) -> None:
        print("\n=== Resultados del Escaneo ===")
        for i, result in enumerate(results, 1):
            print(f"\n[{i}] {result.image.local_path}")
            if result.coordinates:
                print(f"  Ubicación: {result.coordinates.latitude:.6f}, {result.coordinates.longitude:.6f}")
            if result.ok:
                print("  " + format_diseases(result.response.enfermedades).replace("\n", "\n  "))
            else:
                print(f"  Error: {result.error}")

    def confirm(self, record: ScanRecord) -> None:
        print("\n--- Resultado del escaneo ---")
        print(f"Enfermedad detectada: {record.disease_type}")
        print(f"Descripción: {record.description}")
        print(f"Tratamiento: {record.treatment}")
        if self.interactive:
            input("Pulse Enter para cerrar...")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def scan(args, settings):
    """Classify images, then save the results the user accepts."""
    paths = collect_images(args.paths)
    if not paths:
        print("Error: no images to scan")
        sys.exit(1)

    capture = create_capture_store(settings)
    if args.locate:
        for path in paths:
            capture.add_from_camera(FileCamera(path))
    else:
        capture.add_from_gallery(PathGallery(paths))

    presenter = ConsolePresenter(interactive=not args.yes)
    orchestrator = create_orchestrator(settings, presenter=presenter)

    with tqdm(total=len(capture), desc="Classifying", unit="img") as bar:
        results = orchestrator.scan(capture, progress=lambda _: bar.update(1))

    if not (args.save or args.yes):
        return

    user_id = args.user or settings.user_id
    saved = 0
    for i, result in enumerate(results, 1):
        if not result.is_savable:
            continue
        if not args.yes and not ask_yes_no(f"\nGuardar resultado [{i}] {Path(result.image.local_path).name}?"):
            continue
        if orchestrator.save(result, user_id) is not None:
            saved += 1

    print(f"\nSaved {saved} scan(s).")


def history(args, settings):
    """List the user's saved scans, newest first."""
    store = ScanRecordStore(create_document_store(settings))
    records = store.list_all(args.user or settings.user_id)

    if not records:
        print("No hay escaneos guardados")
        return

    print(f"{'Fecha':<20} {'Enfermedad':<28} {'Ubicación':<24} URL")
    print("-" * 100)
    for r in records:
        when = r.scanned_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        where = f"{r.latitude:.4f}, {r.longitude:.4f}" if r.latitude is not None else "N/A"
        print(f"{when:<20} {r.disease_type[:27]:<28} {where:<24} {r.image_url}")
    print(f"\nTotal: {len(records)} scan(s)")


def import_diseases(args, settings):
    """Load disease reference text from a YAML file."""
    lookup = DiseaseLookup(create_document_store(settings))
    added = lookup.import_file(args.file)
    print(f"Imported {added} disease(s) from {args.file}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="OrganoAI - oregano disease scans from the command line"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML config file (default: config.yaml)"
    )
    parser.add_argument(
        "--user", "-u",
        default=None,
        help="User id (default: ORGANOAI_USER_ID)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Classify images and optionally save the results")
    scan_parser.add_argument("paths", nargs="+", help="Image files or directories")
    scan_parser.add_argument("--save", "-s", action="store_true", help="Offer to save each result")
    scan_parser.add_argument("--yes", "-y", action="store_true", help="Save every savable result without asking")
    scan_parser.add_argument(
        "--locate", "-l",
        action="store_true",
        help="Treat images as camera captures and attach a position"
    )
    scan_parser.set_defaults(func=scan)

    history_parser = subparsers.add_parser("history", help="List saved scans")
    history_parser.set_defaults(func=history)

    import_parser = subparsers.add_parser("import-diseases", help="Load disease reference text")
    import_parser.add_argument("file", help="YAML list of {nombre, descripcion, tratamiento}")
    import_parser.set_defaults(func=import_diseases)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
        args.func(args, settings)
    except OrganoAIError as e:
        print(f"Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
