"""Command-line interface for SheetCraft."""

import argparse
import logging
import sys
from pathlib import Path

import uvicorn


def configure_logging(level: str = "INFO"):
    """Configure root logging for CLI and server runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None):
    """Main entry point for the CLI."""
    from .config import settings

    parser = argparse.ArgumentParser(
        description="SheetCraft - AI-assisted spreadsheet generation and editing"
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help="Host to bind to (default: 127.0.0.1)"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help="Port to bind to (default: 8000)"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Offline generation command
    generate_parser = subparsers.add_parser(
        "generate", help="Generate a sample spreadsheet without calling the LLM"
    )
    generate_parser.add_argument(
        "--columns", "-c", required=True, help="Comma-separated column names"
    )
    generate_parser.add_argument(
        "--rows", "-r", type=int, default=5, help="Number of rows (default: 5)"
    )
    generate_parser.add_argument(
        "--description", "-d", default="", help="Task description used for the file name"
    )
    generate_parser.add_argument("--csv", action="store_true", help="Write CSV instead of .xlsx")
    generate_parser.add_argument("--output", "-o", help="Output path (default: derived from description)")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "generate":
        sys.exit(run_generate(args.columns, args.rows, args.description, args.csv, args.output))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "sheetcraft.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_generate(columns: str, rows: int, description: str, as_csv: bool, output: str = None) -> int:
    """Generate a dataset offline and write it to disk. Returns an exit code."""
    from .generation import GenerationEngine, GenerationRequest, GenerationSuccess
    from .workbook import export_workbook

    column_names = [name.strip() for name in columns.split(",")]
    request = GenerationRequest(
        column_count=len(column_names),
        row_count=rows,
        column_names=column_names,
        task_description=description,
        auto_fill=True,
    )
    result = GenerationEngine().generate(request)
    if not isinstance(result, GenerationSuccess):
        print(f"Generation failed: {result.message}", file=sys.stderr)
        return 1

    if as_csv:
        path = Path(output or result.csv_name)
        path.write_text(result.to_csv(), encoding="utf-8")
    else:
        path = Path(output or result.excel_name)
        path.write_bytes(export_workbook(result.to_workbook()))

    print(f"Wrote {len(result.rows)} rows to {path}")
    return 0


if __name__ == "__main__":
    main()
