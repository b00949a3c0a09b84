import argparse
from pathlib import Path

from dotenv import load_dotenv

from .config import ConverterConfig
from .exceptions import ConversionError
from .exporter import output_file_name
from .logging_config import get_logger, setup_logging
from .models import ConversionOptions
from .preview import build_preview
from .service import ConversionService

logger = get_logger(__name__)


def run_convert(args: argparse.Namespace, config: ConverterConfig) -> int:
    service = ConversionService(config)
    options = ConversionOptions(
        extract_tables=args.tables,
        split_by_spaces=args.split_spaces,
        include_info_sheet=args.info_sheet,
        csv_delimiter=config.csv_delimiter,
    )
    pdf_path = Path(args.pdf)
    try:
        result = service.convert_file(str(pdf_path), options)
        output_path = Path(args.output) if args.output else pdf_path.with_name(output_file_name(pdf_path.name))
        service.export_to_path(result, output_path)
    except ConversionError as exc:
        logger.error("%s", exc)
        return 1

    print(f"mode: {result.mode.value}")
    print(f"rows: {result.total_rows}")
    for attempt in result.attempts:
        status = "ok" if attempt.success else f"failed ({attempt.error})"
        print(f"  {attempt.mode.value}: {status}")
    print(f"output_path: {output_path}")

    if args.preview:
        preview = build_preview(result.rows, args.preview)
        for row in preview.rows:
            print("\t".join(row))
        if preview.truncated:
            print(preview.message)
    return 0


def run_server(host: str, port: int, config: ConverterConfig) -> None:
    import uvicorn

    from .app import create_app

    uvicorn.run(create_app(config), host=host, port=port)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="PDF to Excel converter (CLI conversion or web app)."
    )
    parser.add_argument("--serve", action="store_true", help="Run the web app")
    parser.add_argument("--host", help="Server host")
    parser.add_argument("--port", type=int, help="Server port")
    parser.add_argument("--pdf", help="Path to a PDF to convert")
    parser.add_argument("--output", help="Output .xlsx path (default: <pdf>_converted.xlsx)")
    parser.add_argument("--tables", action="store_true", help="Try table extraction first")
    parser.add_argument("--split-spaces", action="store_true", help="Split text on runs of 2+ spaces")
    parser.add_argument("--info-sheet", action="store_true", help="Add a 'Conversion Info' sheet")
    parser.add_argument("--preview", type=int, default=0, metavar="N", help="Print the first N rows")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", help="Optional log file")
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=Path(args.log_file) if args.log_file else None,
    )
    config = ConverterConfig.from_env()

    if args.serve:
        run_server(args.host or config.host, args.port or config.port, config)
        return 0

    if not args.pdf:
        parser.error("Provide --pdf or use --serve to run the web app.")
    return run_convert(args, config)


if __name__ == "__main__":
    raise SystemExit(main())
