"""Session control: one reporter and one interpreter shared by every unit of source text run
through it, in batch (whole file) or interactive (line by line) mode.
"""
from __future__ import annotations
import logging
import sys
from typing import List, Optional, TextIO

from .ast_nodes import Stmt
from .errors import ErrorReporter
from .interpreter import Interpreter
from .lexer import LoxLexer
from .parser import Parser
from .resolver import Resolver
from .tokens import Token

logger = logging.getLogger(__name__)

# exit statuses, sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


class Session:
    """Replaces process-wide interpreter state: the global frame and the error flags live here."""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout
        self.reporter = ErrorReporter(err)
        self.lexer = LoxLexer(self.reporter)
        self.interpreter = Interpreter(self.reporter, self.out)

    def scan(self, source: str) -> List[Token]:
        return self.lexer.tokenize(source)

    def parse(self, source: str) -> List[Stmt]:
        try:
            return Parser(self.scan(source), self.reporter).parse()
        except RecursionError:
            self.reporter.nesting_too_deep()
            return []

    def compile(self, source: str) -> Optional[List[Stmt]]:
        """Scans, parses and resolves; returns None if any static error was reported."""
        statements = self.parse(source)
        if self.reporter.had_error:
            logger.debug("syntax errors reported, not resolving")
            return None

        try:
            Resolver(self.reporter).resolve(statements)
        except RecursionError:
            self.reporter.nesting_too_deep()
        if self.reporter.had_error:
            logger.debug("resolution errors reported, not interpreting")
            return None
        return statements

    def run(self, source: str):
        statements = self.compile(source)
        if statements is None:
            return
        self.interpreter.interpret(statements)

    def exit_status(self) -> int:
        if self.reporter.had_error:
            return EX_DATAERR
        if self.reporter.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK
