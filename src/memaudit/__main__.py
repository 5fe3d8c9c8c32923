"""CLI entry point for memaudit.

Usage:
    memaudit audit data/sample.json --model gpt-4o-mini
    memaudit validate data/sample.json
    memaudit fetch-memorybench --samples 5
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from memaudit import __version__
from memaudit.audit.adapter import LiteLLMAdapter
from memaudit.audit.executor import run_audit
from memaudit.audit.report import generate_reports, print_audit_summary
from memaudit.audit.schemas import AuditConfig
from memaudit.loader import load_dataset
from memaudit.memorybench import fetch_memorybench


def _print_progress(done: int, total: int) -> None:
    print(f"\rProgress: {done}/{total}", end="", flush=True)


def cmd_audit(args: argparse.Namespace) -> None:
    overrides = {"output_dir": args.output, "format": args.format}
    if args.model:
        overrides["model"] = args.model
    config = AuditConfig(**overrides)

    print(f"Loading dataset: {args.dataset}")
    dataset = load_dataset(args.dataset)

    print(f"Running audit with {config.model}...")
    adapter = LiteLLMAdapter.from_config(config)
    result = run_audit(dataset, adapter, model=config.model, on_progress=_print_progress)
    print()

    paths = generate_reports(result, config.output_dir, config.format)
    print_audit_summary(result)
    print(f"\nResults written to: {config.output_dir}")
    for path in paths:
        print(f"  {path}")


def cmd_validate(args: argparse.Namespace) -> None:
    dataset = load_dataset(args.dataset)
    turns = dataset.all_turns()
    facts = dataset.all_facts()

    print(f"✓ Valid dataset: {dataset.id}")
    print(f"  Conversations: {len(dataset.conversations)}")
    print(f"  Total turns: {len(turns)}")
    print(f"  Total facts: {len(facts)}")

    issues = dataset.supersession_issues()
    if issues:
        print(f"  Warnings: {len(issues)}")
        for issue in issues:
            print(f"    - {issue}")


def cmd_fetch_memorybench(args: argparse.Namespace) -> None:
    dataset = fetch_memorybench(args.data_dir, max_samples=args.samples)
    print(f"\nConversations: {len(dataset.conversations)}")
    print(f"Output written to {args.data_dir}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memaudit", description="Agent memory auditing toolkit"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable informational logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    audit = sub.add_parser("audit", help="Run memory audit on a dataset")
    audit.add_argument("dataset", help="Path to dataset file (JSON or JSONL)")
    audit.add_argument(
        "-m",
        "--model",
        default=None,
        help="Model to use for testing (default: $MEMAUDIT_MODEL or gpt-4o-mini)",
    )
    audit.add_argument("-o", "--output", default="./audit-results", help="Output directory")
    audit.add_argument(
        "-f",
        "--format",
        choices=["all", "json", "markdown"],
        default="all",
        help="Output format",
    )
    audit.set_defaults(func=cmd_audit)

    validate = sub.add_parser(
        "validate", help="Validate dataset format without running audit"
    )
    validate.add_argument("dataset", help="Path to dataset file")
    validate.set_defaults(func=cmd_validate)

    fetch = sub.add_parser(
        "fetch-memorybench", help="Download and convert the MemoryBench Locomo-0 split"
    )
    fetch.add_argument(
        "--samples", type=int, default=5, help="Number of conversations to keep"
    )
    fetch.add_argument("--data-dir", default="data/real", help="Output directory")
    fetch.set_defaults(func=cmd_fetch_memorybench)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        args.func(args)
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
