"""Diagnostics for the interpreter pipeline.

Static errors (scan, parse, resolve) are collected on an ErrorReporter so a single run can
surface several of them; runtime errors are raised as LoxRuntimeError and reported once.
"""
from __future__ import annotations
import sys
from typing import Optional, TextIO

from .tokens import Token, TokenType


class ParseError(Exception):
    """Unwinds the parser to the nearest declaration for panic-mode recovery."""

    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class LoxRuntimeError(Exception):
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ErrorReporter:
    """Per-session error state, threaded through every pipeline stage."""

    def __init__(self, err: Optional[TextIO] = None):
        self.err = err if err is not None else sys.stderr
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line: int, message: str):
        self.report(line, "", message)

    def token_error(self, token: Token, message: str):
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def report(self, line: int, where: str, message: str):
        print(f"[line {line}] error{where}: {message}", file=self.err)
        self.had_error = True

    def runtime_error(self, error: LoxRuntimeError):
        print(f"{error.message}\n[line {error.token.line}]", file=self.err)
        self.had_runtime_error = True

    def stack_overflow(self):
        print("Stack overflow.", file=self.err)
        self.had_runtime_error = True

    def nesting_too_deep(self):
        print("Source is nested too deeply.", file=self.err)
        self.had_error = True

    def reset(self):
        # interactive mode keeps going after a bad line
        self.had_error = False
        self.had_runtime_error = False
