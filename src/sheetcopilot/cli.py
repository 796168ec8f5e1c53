"""Command-line interface for SheetCopilot."""

import argparse
import json
import logging
import sys

import uvicorn

from .config import settings


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="SheetCopilot - describe a calculation, get a Google Sheets formula"
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    selection_parser = argparse.ArgumentParser(add_help=False)
    selection_parser.add_argument(
        "--spreadsheet", "-s", default=settings.spreadsheet_id, help="Spreadsheet ID"
    )
    selection_parser.add_argument(
        "--range", "-r", dest="range_notation", default=settings.selection_range,
        help="Selected range, e.g. 'Sheet1!A1:B4'",
    )

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate", parents=[selection_parser], help="Generate a formula from a description"
    )
    generate_parser.add_argument("request", nargs="?", help="What the formula should calculate")
    generate_parser.add_argument(
        "--mode", choices=["plain", "tools"], default=None, help="Completion mode"
    )

    # Preview command
    preview_parser = subparsers.add_parser(
        "preview", parents=[selection_parser], help="Show the context that would be sent to the AI"
    )
    preview_parser.add_argument("request", nargs="?", help="Request to build the prompt for")
    preview_parser.add_argument("--json", action="store_true", help="Print the full preview as JSON")

    # Analyze command
    analyze_parser = subparsers.add_parser(
        "analyze", parents=[selection_parser], help="Describe the selected range"
    )
    analyze_parser.add_argument(
        "--sums", action="store_true", help="Also print numeric column totals"
    )

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

    # Auth command
    subparsers.add_parser("auth", help="Authenticate with Google Sheets API")

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "generate":
        sys.exit(run_generate(args.spreadsheet, args.range_notation, args.request, args.mode))
    elif args.command == "preview":
        sys.exit(run_preview(args.spreadsheet, args.range_notation, args.request, args.json))
    elif args.command == "analyze":
        sys.exit(run_analyze(args.spreadsheet, args.range_notation, args.sums))
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "auth":
        run_auth()
    else:
        parser.print_help()
        sys.exit(1)


def _host(spreadsheet_id, range_notation):
    from .sheets import GoogleSheetsHost

    if not spreadsheet_id:
        print("A spreadsheet ID is required (--spreadsheet or SPREADSHEET_ID).")
        sys.exit(2)
    return GoogleSheetsHost(spreadsheet_id, range_notation)


def run_generate(spreadsheet_id, range_notation, request, mode) -> int:
    """Generate a formula and insert it next to the selection."""
    from .agent import FormulaAgent

    host = _host(spreadsheet_id, range_notation)
    if not request:
        try:
            request = input("Describe the formula you need: ").strip()
        except EOFError:
            request = ""
    if not request:
        print("Please describe the formula you need.")
        return 2

    result = FormulaAgent(host, mode=mode).generate_formula(request)
    if not result.success:
        print(f"Error: {result.error}")
        if result.explanation:
            print(f"\nAI response:\n{result.explanation}")
        return 1

    print(f"Formula: {result.formula}")
    if result.inserted:
        print(f"Inserted into {result.cell_address}")
    else:
        print(f"Not inserted: {result.error}")
        print(f"Enter it manually in {result.cell_address}")
    return 0


def run_preview(spreadsheet_id, range_notation, request, as_json: bool) -> int:
    """Print the debug preview of what would be sent to the model."""
    from .agent import DEFAULT_PREVIEW_REQUEST, FormulaAgent
    from .errors import SheetCopilotError

    agent = FormulaAgent(_host(spreadsheet_id, range_notation))
    try:
        preview = agent.preview(request or DEFAULT_PREVIEW_REQUEST)
    except SheetCopilotError as e:
        print(f"Please select a range of data first ({e})")
        return 1

    if as_json:
        print(preview.model_dump_json(indent=2))
    else:
        print(preview.summary)
        print()
        print(preview.contextual_prompt)
    return 0


def run_analyze(spreadsheet_id, range_notation, sums: bool) -> int:
    """Print the analysis of the selection."""
    from .engine import (
        analyze_snapshot,
        capture_selection,
        selection_summary,
        summarize_columns,
    )
    from .errors import SheetCopilotError

    try:
        snapshot = capture_selection(_host(spreadsheet_id, range_notation))
    except SheetCopilotError as e:
        print(f"Select data to get started ({e})")
        return 1

    analysis = analyze_snapshot(snapshot)
    print(selection_summary(analysis))
    print(json.dumps(analysis.model_dump(mode="json"), indent=2))
    if sums:
        print("Column sums:", summarize_columns(snapshot))
    return 0


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "sheetcopilot.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_auth():
    """Run the Google authentication flow."""
    from .sheets.client import get_credentials

    print("Authenticating with Google Sheets API...")
    try:
        get_credentials()
        print("Authentication successful!")
        print("Token saved. You can now use SheetCopilot with Google Sheets.")
    except Exception as e:
        print(f"Authentication failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
