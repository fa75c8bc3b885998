"""
Command-line checks for condition text.

    strategy-conditions check "p and q" --propositions props.txt --tree
    strategy-conditions tokens "not (p or q)" --propositions props.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import package_logger
from .condition import Condition, ConditionTextError
from .config import Config, ConfigError
from .grammar import CONDITION_NOT_VALID, GrammarValidator
from .proposition_loader import PropositionLoadError, load_propositions_file
from .token_catalog import CatalogError, TokenCatalog

logger = package_logger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_LOAD_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strategy-conditions",
        description="Tokenize and validate strategy graph conditions.",
    )
    parser.add_argument(
        "--propositions",
        help="Propositions file (JSON array, {\"propositions\": [...]}, or one name per line).",
    )
    parser.add_argument(
        "--config",
        help="JSON file with configuration overrides.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate a condition against the grammar.")
    check.add_argument("text", help="Condition text, e.g. 'p and not q'.")
    check.add_argument(
        "--tree",
        action="store_true",
        help="Print the fully parenthesized parse tree on success.",
    )

    tokens = subparsers.add_parser("tokens", help="List the tokens of a condition with their offsets.")
    tokens.add_argument("text", help="Condition text.")
    return parser


def _load(args: argparse.Namespace) -> tuple:
    config = Config.from_file(Path(args.config)) if args.config else Config()
    if args.propositions:
        catalog = TokenCatalog(load_propositions_file(Path(args.propositions)), config.get("shortcuts"))
    else:
        catalog = TokenCatalog.from_config(config)
    return config, catalog


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        config, catalog = _load(args)
    except (ConfigError, PropositionLoadError, CatalogError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    debug = args.verbose or config.get("debug")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        condition = Condition.from_text(args.text, catalog)
    except ConditionTextError as e:
        print(f"Rejected: {e}")
        return EXIT_REJECTED

    if args.command == "tokens":
        for index, (offset, token) in enumerate(zip(condition.boundaries(), condition)):
            print(f"{index:3d} {offset:4d} {token.kind.value:<12} {token.display!r}")
        return EXIT_OK

    try:
        validator = GrammarValidator.from_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    tree = validator.parse_tree(condition)
    if tree is None:
        print(f"Rejected: {CONDITION_NOT_VALID}")
        return EXIT_REJECTED

    print(f"Accepted: {condition.display_text()}")
    if args.tree:
        print(tree)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
