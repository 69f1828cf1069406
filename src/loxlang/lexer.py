from __future__ import annotations
import logging
import sys
from typing import List, Optional, TextIO

import ply.lex as lex

from .errors import ErrorReporter
from .tokens import KEYWORDS, Token, TokenType

logger = logging.getLogger(__name__)


class LoxLexer:

    tokens = tuple(tt.name for tt in TokenType)

    # Ignored characters
    t_ignore = ' \t\r'

    #  Functions with longer names have higher priority
    t_BANG_EQUAL = r'!='
    t_EQUAL_EQUAL = r'=='
    t_GREATER_EQUAL = r'>='
    t_LESS_EQUAL = r'<='

    # Single-character operators
    t_BANG = r'!'
    t_EQUAL = r'='
    t_GREATER = r'>'
    t_LESS = r'<'
    t_MINUS = r'-'
    t_PLUS = r'\+'
    t_SLASH = r'/'
    t_STAR = r'\*'
    t_DOT = r'\.'

    # Parentheses and braces
    t_LEFT_PAREN = r'\('
    t_RIGHT_PAREN = r'\)'
    t_LEFT_BRACE = r'\{'
    t_RIGHT_BRACE = r'\}'

    # Punctuation
    t_SEMICOLON = r';'
    t_COMMA = r','

    def __init__(self, reporter: Optional[ErrorReporter] = None):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.lexer = None

    # Block comments, nested
    def t_BLOCK_COMMENT(self, t):
        r'/\*'
        data = t.lexer.lexdata
        pos = t.lexer.lexpos
        depth = 1

        while depth > 0:
            if pos >= len(data):
                self.reporter.error(t.lexer.lineno, "Unterminated block comment.")
                break

            pair = data[pos:pos + 2]
            if pair == '/*':
                depth += 1
                pos += 2
            elif pair == '*/':
                depth -= 1
                pos += 2
            else:
                if data[pos] == '\n':
                    t.lexer.lineno += 1
                pos += 1

        t.lexer.lexpos = pos

    # Line comments
    def t_COMMENT(self, t):
        r'//[^\n]*'
        pass

    # Strings may span lines; no escapes
    def t_STRING(self, t):
        r'"'
        data = t.lexer.lexdata
        start = t.lexer.lexpos
        end = data.find('"', start)

        if end < 0:
            t.lexer.lineno += data.count('\n', start)
            t.lexer.lexpos = len(data)
            self.reporter.error(t.lexer.lineno, "Unterminated string.")
            return None

        t.value = data[start:end]
        t.lexer.lineno += t.value.count('\n')
        t.lexer.lexpos = end + 1
        return t

    # A trailing '.' is left for the DOT rule
    def t_NUMBER(self, t):
        r'\d+(?:\.\d+)?'
        t.value = float(t.value)
        return t

    def t_IDENTIFIER(self, t):
        r'[A-Za-z_][A-Za-z0-9_]*'
        t.type = KEYWORDS.get(t.value, TokenType.IDENTIFIER).name
        t.value = None
        return t

    #  line number tracking
    def t_newline(self, t):
        r'\n+'
        t.lexer.lineno += len(t.value)

    # Error handling
    def t_error(self, t):
        self.reporter.error(t.lexer.lineno, "Unexpected character.")
        t.lexer.skip(1)

    def build(self, **kwargs):
        """Build the lexer"""
        self.lexer = lex.lex(module=self, **kwargs)
        return self.lexer

    def tokenize(self, data: str) -> List[Token]:
        if not self.lexer:
            self.build()

        self.lexer.input(data)
        self.lexer.lineno = 1
        tokens: List[Token] = []

        while True:
            tok = self.lexer.token()
            if not tok:
                break

            kind = TokenType[tok.type]
            # lexpos has moved past the token, including hand-scanned strings
            lexeme = data[tok.lexpos:self.lexer.lexpos]
            literal = tok.value if kind in (TokenType.NUMBER, TokenType.STRING) else None
            tokens.append(Token(kind, lexeme, literal, tok.lineno))

        tokens.append(Token(TokenType.EOF, "", None, self.lexer.lineno))
        logger.debug("scanned %d tokens over %d lines", len(tokens), self.lexer.lineno)
        return tokens


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    return LoxLexer(reporter).tokenize(source)


def print_tokens(tokens: List[Token], out: Optional[TextIO] = None):
    out = out if out is not None else sys.stdout
    if not tokens:
        print("No tokens found!", file=out)
        return

    print(f"{'Line':<6}| {'Token':<15}| {'Lexeme':<20}| Literal", file=out)
    print("-" * 70, file=out)

    for tok in tokens:
        lexeme = tok.lexeme
        # Limit length for display
        if len(lexeme) > 20:
            lexeme = lexeme[:17] + "..."
        # Display escape characters
        lexeme = repr(lexeme)[1:-1] if '\n' in lexeme or '\t' in lexeme else lexeme
        literal = "" if tok.literal is None else repr(tok.literal)

        print(f"{tok.line:<6}| {tok.type.name:<15}| {lexeme:<20}| {literal}", file=out)
