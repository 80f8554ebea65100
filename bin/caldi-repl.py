#!/usr/bin/env python3
"""Type math problems, get answers."""

from __future__ import annotations

import argparse
import logging
import sys

from caldi.repl import DEFAULT_PROMPT, evaluate_line, run_repl


def main() -> int:
    parser = argparse.ArgumentParser(description="Evaluate arithmetic typed as symbols or words.")
    parser.add_argument("expression", nargs="*", help="Evaluate this expression once and exit")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--no-prompt", action="store_true", help="Do not print a prompt (for piped input)")
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    if args.expression:
        print(evaluate_line(" ".join(args.expression)))
        return 0

    prompt = "" if args.no_prompt or not sys.stdin.isatty() else DEFAULT_PROMPT
    run_repl(sys.stdin, sys.stdout, prompt=prompt)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
