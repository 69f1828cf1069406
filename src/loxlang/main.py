import argparse
import logging
import sys
from typing import List, Optional

from .lexer import print_tokens
from .printer import AstPrinter
from .session import EX_NOINPUT, EX_OK, EX_USAGE, Session
from .shell import Shell

logger = logging.getLogger(__name__)

# each Lox call costs several Python frames
RECURSION_LIMIT = 10000


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def build_arg_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="loxlang", description="Run a Lox script, or start a prompt.")
    parser.add_argument("script", nargs="?", help="script to run; omit for interactive mode")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--tokens", action="store_true", help="print the token table and exit")
    mode.add_argument("--ast", action="store_true", help="print the parsed tree and exit")
    mode.add_argument("--check", action="store_true", help="report static errors without running")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages to stderr")
    return parser


def read_input(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.script is None:
        if args.tokens or args.ast or args.check:
            parser.error("--tokens, --ast and --check need a script")
        Shell(Session()).cmdloop()
        return EX_OK

    try:
        source = read_input(args.script)
    except OSError as e:
        print(f"Error: could not read '{args.script}': {e.strerror}", file=sys.stderr)
        return EX_NOINPUT

    sess = Session()

    if args.tokens:
        print_tokens(sess.scan(source))
    elif args.ast:
        statements = sess.parse(source)
        if not sess.reporter.had_error:
            print(AstPrinter().print_program(statements))
    elif args.check:
        if sess.compile(source) is not None:
            print("OK: no syntax/resolution errors found.")
    else:
        logger.debug("running %s", args.script)
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(limit, RECURSION_LIMIT))
        try:
            sess.run(source)
        finally:
            sys.setrecursionlimit(limit)

    return sess.exit_status()


if __name__ == "__main__":
    sys.exit(main())
