from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import translate_yuml
from .dot_runner import OUTPUT_FORMATS, run_dot
from .errors import YumlError
from .types import TranslateOptions

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="yuml-dot",
        description="Translate yUML class and activity diagrams to Graphviz DOT.",
    )
    p.add_argument("input", help="yUML source file, or - for stdin.")
    p.add_argument("-o", "--output", type=Path, default=None,
                   help="Write here instead of stdout.")
    p.add_argument("-t", "--type", choices=("class", "activity"), default=None,
                   help="Diagram family; overrides the // {type:...} directive.")
    p.add_argument("-d", "--direction", choices=("TB", "LR", "RL"), default=None,
                   help="Flow direction; overrides the // {direction:...} directive.")
    p.add_argument("-f", "--format", choices=("dot",) + OUTPUT_FORMATS, default="dot",
                   help="Output format. Anything but dot needs Graphviz installed.")
    p.add_argument("--dark", action="store_true",
                   help="White strokes and text for dark backgrounds.")
    p.add_argument("--strict", action="store_true",
                   help="Exit with status 1 if any statement was skipped or conflicted.")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="Debug logging.")
    return p


def _read_source(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        source = _read_source(ns.input)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("cannot read %s: %s", ns.input, exc)
        return 2

    options = TranslateOptions(direction=ns.direction, dark=ns.dark or None)
    try:
        result = translate_yuml(source, ns.type, options)
        if ns.format == "dot":
            payload = result.dot.encode("utf-8")
        else:
            payload = run_dot(result.dot, ns.format)
    except YumlError as exc:
        logger.error("%s", exc)
        return 2

    if result.diagnostics:
        logger.warning("%d statement(s) skipped or in conflict", len(result.diagnostics))

    if ns.output is None:
        sys.stdout.buffer.write(payload)
        sys.stdout.flush()
    else:
        ns.output.write_bytes(payload)

    if ns.strict and not result.ok:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
