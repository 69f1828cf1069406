from __future__ import annotations
import logging
from typing import List, Optional

from .ast_nodes import *
from .errors import ErrorReporter, ParseError
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

MAX_ARGS = 255

# tokens that begin a declaration or statement; panic mode stops in front of them
STATEMENT_STARTS = (
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
    TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
)


class TokenStream:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.i = 0

    def peek(self) -> Token:
        return self.tokens[self.i]

    def previous(self) -> Token:
        return self.tokens[self.i - 1]

    def at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.at_end():
            self.i += 1
        return self.previous()

    def check(self, ttype: TokenType) -> bool:
        return self.peek().type == ttype

    def match(self, *types: TokenType) -> Optional[Token]:
        if self.peek().type in types and not self.at_end():
            return self.advance()
        return None


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.ts = TokenStream(tokens)
        self.reporter = reporter if reporter is not None else ErrorReporter()

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.ts.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        logger.debug("parsed %d top-level statements", len(statements))
        return statements

    # ---------------- errors ----------------
    def error(self, token: Token, message: str) -> ParseError:
        self.reporter.token_error(token, message)
        return ParseError(token, message)

    def expect(self, ttype: TokenType, message: str) -> Token:
        if self.ts.check(ttype):
            return self.ts.advance()
        raise self.error(self.ts.peek(), message)

    def synchronize(self):
        self.ts.advance()
        while not self.ts.at_end():
            if self.ts.previous().type == TokenType.SEMICOLON:
                return
            if self.ts.peek().type in STATEMENT_STARTS:
                return
            self.ts.advance()

    # ---------------- DECLARATIONS ----------------
    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.ts.match(TokenType.FUN):
                return self.parse_function("function")
            if self.ts.match(TokenType.VAR):
                return self.parse_vardecl()
            return self.parse_stmt()
        except ParseError as e:
            logger.debug("recovering from parse error at line %d: %s", e.token.line, e.message)
            self.synchronize()
            return None

    def parse_function(self, kind: str) -> FunctionDef:
        name = self.expect(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.expect(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not self.ts.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.ts.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.expect(TokenType.IDENTIFIER, "Expect parameter name."))
                if self.ts.match(TokenType.COMMA) is None:
                    break
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.expect(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.parse_block()
        return FunctionDef(name=name, params=params, body=body)

    def parse_vardecl(self) -> VarDecl:
        name = self.expect(TokenType.IDENTIFIER, "Expect variable name.")
        init = None
        if self.ts.match(TokenType.EQUAL):
            init = self.parse_expr()
        self.expect(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDecl(name=name, initializer=init)

    # ---------------- STATEMENTS ----------------
    def parse_stmt(self) -> Stmt:
        if self.ts.match(TokenType.PRINT):
            return self.parse_print()
        if self.ts.match(TokenType.RETURN):
            return self.parse_return()
        if self.ts.match(TokenType.WHILE):
            return self.parse_while()
        if self.ts.match(TokenType.FOR):
            return self.parse_for()
        if self.ts.match(TokenType.IF):
            return self.parse_if()
        if self.ts.match(TokenType.LEFT_BRACE):
            return Block(statements=self.parse_block())

        # Otherwise: expression statement
        return self.parse_expr_stmt()

    def parse_block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.ts.check(TokenType.RIGHT_BRACE) and not self.ts.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.expect(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_print(self) -> PrintStmt:
        value = self.parse_expr()
        self.expect(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(expression=value)

    def parse_return(self) -> Return:
        keyword = self.ts.previous()
        value = None
        if not self.ts.check(TokenType.SEMICOLON):
            value = self.parse_expr()
        self.expect(TokenType.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword=keyword, value=value)

    def parse_expr_stmt(self) -> ExprStmt:
        expr = self.parse_expr()
        self.expect(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExprStmt(expression=expr)

    def parse_if(self) -> IfStmt:
        self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        cond = self.parse_expr()
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.parse_stmt()
        else_branch = None
        # claimed here, so a dangling else binds to the innermost if
        if self.ts.match(TokenType.ELSE):
            else_branch = self.parse_stmt()
        return IfStmt(condition=cond, then_branch=then_branch, else_branch=else_branch)

    def parse_while(self) -> WhileStmt:
        self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        cond = self.parse_expr()
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_stmt()
        return WhileStmt(condition=cond, body=body)

    def parse_for(self) -> Stmt:
        """Desugars into { init; while (cond) { body; increment; } }."""
        self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")
        if self.ts.match(TokenType.SEMICOLON):
            init = None
        elif self.ts.match(TokenType.VAR):
            init = self.parse_vardecl()
        else:
            init = self.parse_expr_stmt()

        cond = None
        if not self.ts.check(TokenType.SEMICOLON):
            cond = self.parse_expr()
        self.expect(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.ts.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expr()
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_stmt()
        if increment is not None:
            body = Block(statements=[body, ExprStmt(expression=increment)])
        if cond is None:
            cond = Literal(value=True)
        body = WhileStmt(condition=cond, body=body)
        if init is not None:
            body = Block(statements=[init, body])
        return body

    # ---------------- EXPRESSIONS (precedence) ----------------
    def parse_expr(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        expr = self.parse_or()
        equals = self.ts.match(TokenType.EQUAL)
        if equals:
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(name=expr.name, value=value)
            # reported, but the parser is not confused
            self.error(equals, "Invalid assignment target.")
        return expr

    def parse_or(self) -> Expr:
        expr = self.parse_and()
        while True:
            op = self.ts.match(TokenType.OR)
            if op is None:
                break
            rhs = self.parse_and()
            expr = LogicalOp(left=expr, operator=op, right=rhs)
        return expr

    def parse_and(self) -> Expr:
        expr = self.parse_equality()
        while True:
            op = self.ts.match(TokenType.AND)
            if op is None:
                break
            rhs = self.parse_equality()
            expr = LogicalOp(left=expr, operator=op, right=rhs)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while True:
            op = self.ts.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
            if op is None:
                break
            rhs = self.parse_comparison()
            expr = BinaryOp(left=expr, operator=op, right=rhs)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while True:
            op = self.ts.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                               TokenType.LESS, TokenType.LESS_EQUAL)
            if op is None:
                break
            rhs = self.parse_term()
            expr = BinaryOp(left=expr, operator=op, right=rhs)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while True:
            op = self.ts.match(TokenType.MINUS, TokenType.PLUS)
            if op is None:
                break
            rhs = self.parse_factor()
            expr = BinaryOp(left=expr, operator=op, right=rhs)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while True:
            op = self.ts.match(TokenType.SLASH, TokenType.STAR)
            if op is None:
                break
            rhs = self.parse_unary()
            expr = BinaryOp(left=expr, operator=op, right=rhs)
        return expr

    def parse_unary(self) -> Expr:
        op = self.ts.match(TokenType.BANG, TokenType.MINUS)
        if op:
            operand = self.parse_unary()
            return UnaryOp(operator=op, right=operand)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while self.ts.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        args: List[Expr] = []
        if not self.ts.check(TokenType.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGS:
                    self.error(self.ts.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                args.append(self.parse_expr())
                if self.ts.match(TokenType.COMMA) is None:
                    break
        paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee=callee, paren=paren, arguments=args)

    def parse_primary(self) -> Expr:
        if self.ts.match(TokenType.FALSE):
            return Literal(value=False)
        if self.ts.match(TokenType.TRUE):
            return Literal(value=True)
        if self.ts.match(TokenType.NIL):
            return Literal(value=None)

        tok = self.ts.match(TokenType.NUMBER, TokenType.STRING)
        if tok:
            return Literal(value=tok.literal)

        tok = self.ts.match(TokenType.IDENTIFIER)
        if tok:
            return Variable(name=tok)

        if self.ts.match(TokenType.LEFT_PAREN):
            expr = self.parse_expr()
            self.expect(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expression=expr)

        raise self.error(self.ts.peek(), "Expect expression.")


def parse(tokens: List[Token], reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    return Parser(tokens, reporter).parse()
