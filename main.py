"""
Resume parser — command-line entry point.

Commands:
  parse <path>    Run the full pipeline (extract → model → normalize) on a
                  local file or directory, using the in-memory store
  extract <file>  Print only the extracted plain text
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config.settings import settings
from ingestion.extractors import extract_text
from ingestion.pipeline import BatchResult, IngestionPipeline, PipelineException
from ingestion.processor import ResumeProcessor
from llm_clients.factory import create_llm_client_from_settings
from persistence.factory import create_store

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
#  Output helpers
# ─────────────────────────────────────────────────────────────────────────────

W = 60  # box width


def _title(text: str) -> None:
    bar = "─" * W
    padding = max(0, W - len(text) - 2)
    print(f"\n┌{bar}┐")
    print(f"│  {text}{' ' * padding}│")
    print(f"└{bar}┘\n")


def _ok(msg: str)    -> None: print(f"  ✓  {msg}")
def _warn(msg: str)  -> None: print(f"  ⚠  {msg}")
def _error(msg: str) -> None: print(f"  ✗  {msg}")


# ─────────────────────────────────────────────────────────────────────────────
#  Commands
# ─────────────────────────────────────────────────────────────────────────────

def build_pipeline(provider: Optional[str] = None, model: Optional[str] = None) -> IngestionPipeline:
    """Wire an in-memory store and the configured completion client."""
    store = create_store("memory")
    llm_client = create_llm_client_from_settings(settings, provider=provider, model=model)
    processor = ResumeProcessor.from_settings(store, llm_client, settings)
    return IngestionPipeline(processor=processor)


def cmd_parse(args: argparse.Namespace) -> int:
    path = Path(args.path)
    pipeline = build_pipeline(args.provider, args.model)

    try:
        if path.is_dir():
            result = pipeline.process_directory(path, recursive=args.recursive)
        else:
            if not path.exists():
                _error(f"File not found: {path}")
                return 1
            result = pipeline.process_files([path])
    except PipelineException as exc:
        _error(str(exc))
        return 1

    if args.json:
        payload = [
            r.outcome.to_dict() if r.outcome else {"source": r.source, "success": False, "error": r.error_message}
            for r in result.results
        ]
        print(json.dumps(payload if len(payload) != 1 else payload[0], indent=2, ensure_ascii=False))
    else:
        _print_batch(result)

    return 0 if result.failed == 0 else 1


def _print_batch(result: BatchResult) -> None:
    _title("PARSE RESULTS")
    for r in result.results:
        name = Path(r.source).name
        if not r.success:
            _error(f"{name}: {r.error_message}")
            continue
        if r.degraded:
            _warn(f"{name}: parsed with warnings (no structured fields)")
        else:
            _ok(f"{name}")
        profile = r.outcome.profile if r.outcome else None
        if profile and profile.has_structured_data:
            print(f"       name      : {profile.full_name or '-'}")
            print(f"       email     : {profile.email or '-'}")
            print(f"       phone     : {profile.phone or '-'}")
            print(f"       location  : {profile.location or '-'}")
            print(f"       skills    : {', '.join(profile.skills) or '-'}")
            print(f"       experience: {len(profile.experience)} entries")
            print(f"       education : {len(profile.education)} entries")
    print()
    _ok(f"Processed: {result.successful}/{result.total_files}  ({result.success_rate:.0f} %)")
    if result.degraded:
        _warn(f"With warnings: {result.degraded}")
    if result.failed:
        _warn(f"Failed: {result.failed}")
    print()


def cmd_extract(args: argparse.Namespace) -> int:
    path = Path(args.path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        _error(f"Cannot read {path}: {exc}")
        return 1

    text = extract_text(data, path.name, pdf_strategy=args.strategy)
    if not text:
        _warn("No text could be extracted.")
        return 1
    print(text)
    return 0


# ─────────────────────────────────────────────────────────────────────────────
#  Entry point
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract structured candidate data from resumes.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show INFO logs")
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse a resume file or a directory of resumes")
    p_parse.add_argument("path")
    p_parse.add_argument("--provider", default=None, help="Completion provider (openai, gemini)")
    p_parse.add_argument("--model", default=None, help="Model name override")
    p_parse.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    p_parse.add_argument("--recursive", action="store_true", help="Recurse into subdirectories")
    p_parse.set_defaults(func=cmd_parse)

    p_extract = sub.add_parser("extract", help="Print extracted text only")
    p_extract.add_argument("path")
    p_extract.add_argument("--strategy", default=None, help="PDF strategy (heuristic, pypdf2)")
    p_extract.set_defaults(func=cmd_extract)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(settings.LOG_LEVEL.upper())
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
