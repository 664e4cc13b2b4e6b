from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from .diagnostics import CodeCheckMessage, ScanError
from .errors import OLUserError
from .jsonic import dumps as jdumps
from .keywords import load_keywords
from .lexer import Scanner, Token, TokenType
from .report_schema import Diagnostic, KeywordsReport, TokenRecord, TokensReport
from .version import tool_version

ENV_DEBUG = "OLPARSE_DEBUG"


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="olparse",
        description="Scanner and parser front end for service-oriented sources",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_tokens = sub.add_parser("tokens", help="Token stream of a source file")
    sp_tokens.add_argument("file", help="source file to scan")
    sp_tokens.add_argument("--json", action="store_true", help="print a JSON report instead of text")
    sp_tokens.add_argument(
        "--newlines",
        action="store_true",
        help="emit NEWLINE tokens at line breaks",
    )

    sp_keywords = sub.add_parser("keywords", help="Keyword vocabulary per grammar scope")
    sp_keywords.add_argument("scope", nargs="?", help="scope name (all scopes when omitted)")
    sp_keywords.add_argument(
        "--config",
        metavar="PATH",
        help="YAML overlay extending the packaged vocabulary",
    )
    sp_keywords.add_argument("--json", action="store_true", help="print JSON")

    return p


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get(ENV_DEBUG) else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger("olparse")
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def _scan(path: Path, newlines: bool) -> tuple[List[TokenRecord], List[CodeCheckMessage]]:
    """Scans a whole file; a scan error skips the rest of its line."""
    if not path.is_file():
        raise OLUserError(f"Source file not found: {path}")

    scanner = Scanner.from_path(path, newline_tokens=newlines)
    records: List[TokenRecord] = []
    problems: List[CodeCheckMessage] = []

    while True:
        try:
            token = scanner.get_token()
        except ScanError as e:
            problems.append(e.message)
            scanner.read_line_after_error()
            continue
        records.append(_record(token, scanner))
        if token.is_eof():
            return records, problems


def _record(token: Token, scanner: Scanner) -> TokenRecord:
    content = token.content if token.type.is_variable else token.type.value
    return TokenRecord(
        line=scanner.token_line,
        column=scanner.token_column,
        type=token.type.name,
        content=content,
    )


def _diagnostic(message: CodeCheckMessage) -> Diagnostic:
    ctx = message.context
    return Diagnostic(
        source=ctx.source,
        start_line=ctx.start_line,
        end_line=ctx.end_line,
        column=ctx.column,
        description=message.description,
        help=message.help,
        code=[line.rstrip("\n") for line in ctx.code],
    )


def _format_record(record: TokenRecord) -> str:
    if record.type == TokenType.NEWLINE.name:
        return f"{record.line}:{record.column} {record.type}"
    return f"{record.line}:{record.column} {record.type} {record.content!r}"


def _run_tokens(ns: argparse.Namespace) -> int:
    path = Path(ns.file)
    records, problems = _scan(path, bool(ns.newlines))

    if ns.json:
        report = TokensReport(
            source=str(path),
            tokens=records,
            diagnostics=[_diagnostic(p) for p in problems],
        )
        sys.stdout.write(jdumps(report.model_dump(mode="json")))
    else:
        for record in records:
            sys.stdout.write(_format_record(record) + "\n")

    for problem in problems:
        sys.stderr.write(problem.render().rstrip() + "\n")
    return 2 if problems else 0


def _run_keywords(ns: argparse.Namespace) -> int:
    registry = load_keywords(Path(ns.config) if ns.config else None)

    if ns.scope is not None:
        if ns.scope not in registry.scopes():
            raise OLUserError(
                f"Unknown scope '{ns.scope}'. Known scopes: {', '.join(registry.scopes())}"
            )
        scopes = {ns.scope: registry.keywords_for_scope(ns.scope)}
    else:
        scopes = registry.as_dict()

    if ns.json:
        sys.stdout.write(jdumps(KeywordsReport(scopes=scopes).model_dump(mode="json")))
        return 0

    for name, terms in scopes.items():
        sys.stdout.write(f"{name}: {', '.join(terms)}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        if ns.cmd == "tokens":
            return _run_tokens(ns)

        if ns.cmd == "keywords":
            return _run_keywords(ns)

    except OLUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
