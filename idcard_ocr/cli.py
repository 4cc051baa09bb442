"""Command-line interface for local ID card processing.

Provides subcommands to run a pipeline on individual image files,
process a folder of card images into a CSV, and start the API server.
"""

import argparse
import csv
import json
import sys
import time
from pathlib import Path

from idcard_ocr.main import main as run_server
from idcard_ocr.ocr.document_processor import (
    DocumentProcessor,
    DocumentResult,
    PipelineVersion,
)
from idcard_ocr.utils.config import AppConfig, load_config
from idcard_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.png", "*.jpg", "*.jpeg", "*.tiff", "*.tif", "*.bmp")
_META_COLUMNS = ["filename", "status", "processing_time_s", "error"]
_PIPELINE_CHOICES = [v.value for v in PipelineVersion]


def _find_images(input_dir: Path) -> list[Path]:
    """Find all supported image files in a directory.

    Args:
        input_dir: Directory to scan for images.

    Returns:
        Sorted list of image file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def _result_to_dict(result: DocumentResult) -> dict[str, object]:
    """Convert a processing result into a JSON-ready mapping."""
    return {
        "filename": result.source_file,
        "pipeline": result.version.value,
        "fields": result.fields,
        "text": result.text,
    }


def process_folder(
    input_dir: Path,
    output_csv: Path,
    version: PipelineVersion = PipelineVersion.V3,
    verbose: bool = False,
    config: AppConfig | None = None,
) -> dict[str, int]:
    """Process all card images in a folder and export fields to CSV.

    Args:
        input_dir: Directory containing image files.
        output_csv: Path for the output CSV file.
        version: Pipeline version to run on each image.
        verbose: Whether to print per-file progress.
        config: Application config. Loaded from disk when omitted.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    processor = DocumentProcessor(config or load_config())

    files = _find_images(input_dir)
    if not files:
        logger.warning("No images found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d images to process", len(files))

    results: list[dict[str, object]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        try:
            doc = processor.process(file_path, version, file_path.name)
            row: dict[str, object] = {
                "filename": file_path.name,
                "status": "success",
                "processing_time_s": round(time.time() - start_time, 2),
                "error": None,
            }
            row.update(doc.fields)
            results.append(row)
            successful += 1
        except Exception as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            results.append(
                {
                    "filename": file_path.name,
                    "status": "failed",
                    "error": str(exc),
                }
            )
            failed += 1

    _write_csv(results, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write extraction results to a CSV file.

    Meta columns come first, followed by one column per field name
    seen in any row.

    Args:
        results: List of result dictionaries.
        output_path: Path for the output CSV file.
    """
    if not results:
        return

    all_keys: set[str] = set()
    for r in results:
        all_keys.update(r.keys())

    field_columns = sorted(all_keys - set(_META_COLUMNS))
    columns = [c for c in _META_COLUMNS if c in all_keys] + field_columns

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(results)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout."""
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def extract_images(
    file_paths: list[Path],
    version: PipelineVersion = PipelineVersion.V3,
    config: AppConfig | None = None,
) -> list[dict[str, object]]:
    """Run one pipeline over several image files.

    Args:
        file_paths: Image files to process.
        version: Pipeline version to run.
        config: Application config. Loaded from disk when omitted.

    Returns:
        One dictionary per image with filename, fields, and text.
    """
    processor = DocumentProcessor(config or load_config())
    return [
        _result_to_dict(processor.process(path, version, path.name))
        for path in file_paths
    ]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idcard-ocr",
        description="ID Card OCR toolkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser(
        "extract", help="Process one or more image files"
    )
    extract_parser.add_argument(
        "files", type=Path, nargs="+", help="Image files to process"
    )
    extract_parser.add_argument(
        "-p",
        "--pipeline",
        choices=_PIPELINE_CHOICES,
        default=PipelineVersion.V3.value,
        help="Pipeline version (default: v3)",
    )
    extract_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of images")
    batch_parser.add_argument("input_dir", type=Path, help="Input directory with images")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-p",
        "--pipeline",
        choices=_PIPELINE_CHOICES,
        default=PipelineVersion.V3.value,
        help="Pipeline version (default: v3)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API server")
    serve_parser.add_argument("--host", help="Bind address (default from config)")
    serve_parser.add_argument("--port", type=int, help="Port (default from config)")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = load_config()

    if args.command == "serve":
        if args.host:
            config.server.host = args.host
        if args.port:
            config.server.port = args.port
        run_server(config)
        return

    setup_logging(config.log_level)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(
            args.input_dir,
            args.output,
            PipelineVersion(args.pipeline),
            args.verbose,
            config,
        )
    elif args.command == "extract":
        missing = [p for p in args.files if not p.exists()]
        if missing:
            print(f"Error: {missing[0]} does not exist", file=sys.stderr)
            sys.exit(1)
        results = extract_images(args.files, PipelineVersion(args.pipeline), config)
        output_str = json.dumps(results, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
