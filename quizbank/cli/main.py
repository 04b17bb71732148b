from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from tqdm import tqdm

from quizbank.analysis.answer_audit import (
    audit_pool,
    format_audit_report,
    write_summary_csv,
)
from quizbank.config import AppConfig, default_app_config
from quizbank.data.loader import LevelLibrary, load_pool
from quizbank.utils.determinism import set_determinism
from quizbank.utils.io import write_json, write_jsonl
from quizbank.utils.logging import setup_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_AUDIT_FAILED = 2


def _load_config(path: str | None) -> AppConfig:
    if path is None:
        return default_app_config()
    return AppConfig.from_json(path)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizbank",
        description="quizbank CLI - normalize and audit multiple-choice question banks",
        epilog="""Examples:
  # Load and preview a level file
  quizbank load public/data/quizData_A1.json --level A1

  # Preview with shuffled choices and export the normalized pool
  quizbank load public/data/quizData_A2.json --shuffle-seed 7 --export out/A2.jsonl

  # Audit the configured level files
  quizbank audit --data-dir public/data --levels A1 A2

  # Audit explicit files, write JSON and CSV summaries, fail on problems
  quizbank audit bank1.json bank2.json --output out/audit.json --csv out/audit.csv --strict
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    load_parser = subparsers.add_parser("load", help="Load and preview a question bank")
    load_parser.add_argument("path", help="Path to a .json or .jsonl question bank")
    load_parser.add_argument("--level", default="", help="Level label for the pool (e.g. A1)")
    load_parser.add_argument("--shuffle-seed", type=int, default=None, help="Shuffle choices per question with this seed")
    load_parser.add_argument("--limit", type=int, default=3, help="Number of questions to preview (default: 3)")
    load_parser.add_argument("--category", help="Keep only questions in this category")
    load_parser.add_argument("--export", help="Write the normalized questions to this JSONL file")
    load_parser.add_argument("--config", "-c", default=None, help="Configuration file path")
    load_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    audit_parser = subparsers.add_parser("audit", help="Check correct-answer presence and index distribution")
    audit_parser.add_argument("paths", nargs="*", help="Question-bank files (default: configured level files)")
    audit_parser.add_argument("--data-dir", help="Directory holding level files (overrides config)")
    audit_parser.add_argument("--levels", nargs="+", help="Levels to audit (overrides config)")
    audit_parser.add_argument("--output", "-o", help="Write the full audit as JSON")
    audit_parser.add_argument("--csv", help="Write a one-row-per-pool CSV summary")
    audit_parser.add_argument("--strict", action="store_true", help="Exit with code 2 if any pool has problems")
    audit_parser.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    audit_parser.add_argument("--config", "-c", default=None, help="Configuration file path")
    audit_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def _cmd_load(args, cfg: AppConfig, logger) -> int:
    if args.shuffle_seed is not None:
        set_determinism(seed=args.shuffle_seed)
    pool = load_pool(
        args.path,
        level=args.level,
        config=cfg.normalizer,
        id_salt=cfg.data.id_salt,
        shuffle_seed=args.shuffle_seed,
    )
    logger.info("Loaded %d questions from %s", len(pool), args.path)
    if args.category:
        pool = pool.by_category(args.category)
        logger.info("Kept %d questions in category %r", len(pool), args.category)
    print(f"Loaded {len(pool)} questions ({len(pool.unresolved())} unresolved) from {args.path}")
    for q in pool[: max(args.limit, 0)]:
        ci = "unresolved" if q.correct_index is None else q.correct_index
        print(f"{q.id} | {q.question_text[:60]} | choices={len(q.choices)} | correct={ci}")

    if args.export:
        write_jsonl(args.export, (q._asdict() for q in pool))
        logger.info("Exported normalized questions to %s", args.export)
    return EXIT_OK


def _cmd_audit(args, cfg: AppConfig, logger) -> int:
    if args.paths:
        targets = [(Path(p).stem, Path(p)) for p in args.paths]
        library = None
    else:
        if args.data_dir:
            cfg.data.data_dir = args.data_dir
        if args.levels:
            cfg.data.levels = list(args.levels)
        library = LevelLibrary(cfg.data, cfg.normalizer)
        targets = [(lvl, library.path_for(lvl)) for lvl in cfg.data.levels]

    reports = []
    for name, path in tqdm(targets, desc="Auditing", disable=args.no_progress or len(targets) < 2):
        if library is not None:
            pool = library.get(name)
        else:
            pool = load_pool(path, level=name, config=cfg.normalizer, id_salt=cfg.data.id_salt)
        report = audit_pool(pool, cfg.audit)
        reports.append(report)
        print()
        print(format_audit_report(report))

    if args.output:
        write_json(args.output, {"reports": [r.to_dict() for r in reports]})
        logger.info("Audit written to %s", args.output)
    if args.csv:
        write_summary_csv(args.csv, reports)
        logger.info("Summary CSV written to %s", args.csv)

    if args.strict and any(r.has_problems for r in reports):
        return EXIT_AUDIT_FAILED
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_ERROR

    try:
        cfg = _load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Config file '{args.config}' not found")
        return EXIT_ERROR
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON format in '{args.config}': {e}")
        return EXIT_ERROR
    except TypeError as e:
        print(f"Error: Unknown setting in '{args.config}': {e}")
        return EXIT_ERROR
    except ValueError as e:
        print(f"Error: Invalid config '{args.config}': {e}")
        return EXIT_ERROR

    level = "DEBUG" if args.verbose else cfg.logging.level
    logger = setup_logging(cfg.logging.log_dir, cfg.logging.filename, level, cfg.logging.structured)

    try:
        if args.command == "load":
            return _cmd_load(args, cfg, logger)
        return _cmd_audit(args, cfg, logger)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        logger.error("FileNotFoundError: %s", e)
        return EXIT_ERROR
    except ValueError as e:
        print(f"Error: {e}")
        logger.error("ValueError: %s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
