import io
import unittest

from loxlang.ast_nodes import Assign, BinaryOp, Call, ExprStmt, Literal, Variable
from loxlang.errors import ErrorReporter
from loxlang.lexer import LoxLexer
from loxlang.parser import Parser
from loxlang.printer import AstPrinter


def parse_source(source):
    err = io.StringIO()
    reporter = ErrorReporter(err)
    statements = Parser(LoxLexer(reporter).tokenize(source), reporter).parse()
    return statements, reporter, err.getvalue()


def printed(source):
    statements, reporter, err = parse_source(source)
    assert not reporter.had_error, err
    return AstPrinter().print_program(statements)


class ExpressionTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "1 + 2 * 3;": "(; (+ 1 (* 2 3)))",
            "(1 + 2) * 3;": "(; (* (group (+ 1 2)) 3))",
            "-123 * (45.67);": "(; (* (- 123) (group 45.67)))",
            "1 < 2 == 3 >= 4;": "(; (== (< 1 2) (>= 3 4)))",
            "!!true == false;": "(; (== (! (! true)) false))",
            "a or b and c;": "(; (or a (and b c)))",
            "a and b or c;": "(; (or (and a b) c))",
            "6 / 3 - 1;": "(; (- (/ 6 3) 1))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_left_associative(self):
        self.assertEqual(printed("1 - 2 - 3;"), "(; (- (- 1 2) 3))")
        self.assertEqual(printed("8 / 4 / 2;"), "(; (/ (/ 8 4) 2))")

    def test_assignment_is_right_associative(self):
        self.assertEqual(printed("a = b = 1;"), "(; (= a (= b 1)))")
        statements, _, _ = parse_source("a = 1;")
        self.assertIsInstance(statements[0].expression, Assign)
        self.assertEqual(statements[0].expression.name.lexeme, "a")

    def test_calls(self):
        self.assertEqual(printed("f(1, 2)(3);"), "(; (call (call f 1 2) 3))")
        self.assertEqual(printed("f();"), "(; (call f))")
        statements, _, _ = parse_source("f(\n1);")
        call = statements[0].expression
        self.assertIsInstance(call, Call)
        self.assertEqual(call.paren.line, 2)

    def test_literals(self):
        statements, _, _ = parse_source('nil; true; "hi"; 2.5;')
        values = [st.expression.value for st in statements]
        self.assertEqual(values, [None, True, "hi", 2.5])
        self.assertEqual(printed('print "hi";'), '(print "hi")')

    def test_tree_shape(self):
        statements, _, _ = parse_source("x + 1;")
        expr = statements[0].expression
        self.assertIsInstance(statements[0], ExprStmt)
        self.assertIsInstance(expr, BinaryOp)
        self.assertIsInstance(expr.left, Variable)
        self.assertEqual(expr.right, Literal(value=1.0))


class StatementTestCase(unittest.TestCase):

    def test_declarations(self):
        self.assertEqual(printed("var x;"), "(var x)")
        self.assertEqual(printed("var x = 1;"), "(var x = 1)")
        self.assertEqual(printed("fun add(a, b) { return a + b; }"), "(fun add(a b) (return (+ a b)))")
        self.assertEqual(printed("fun f() { return; }"), "(fun f() (return))")

    def test_block_and_while(self):
        self.assertEqual(printed("{ var a = 1; print a; }"), "(block (var a = 1) (print a))")
        self.assertEqual(printed("while (x) x = x - 1;"), "(while x (; (= x (- x 1))))")

    def test_for_desugars_to_while(self):
        self.assertEqual(
            printed("for (var i = 0; i < 3; i = i + 1) print i;"),
            "(block (var i = 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))")
        self.assertEqual(printed("for (;;) print 1;"), "(while true (print 1))")
        self.assertEqual(printed("for (i = 0; i < 1;) print i;"),
                         "(block (; (= i 0)) (while (< i 1) (print i)))")

    def test_dangling_else_binds_to_nearest_if(self):
        self.assertEqual(printed("if (a) if (b) print 1; else print 2;"),
                         "(if a (if-else b (print 1) (print 2)))")


class ParseErrorTestCase(unittest.TestCase):

    def test_invalid_assignment_target(self):
        statements, reporter, err = parse_source("a + b = c;")
        self.assertTrue(reporter.had_error)
        self.assertEqual(err, "[line 1] error at '=': Invalid assignment target.\n")
        # reported without panicking
        self.assertEqual(len(statements), 1)

    def test_error_at_end(self):
        _, reporter, err = parse_source("print 1")
        self.assertTrue(reporter.had_error)
        self.assertEqual(err, "[line 1] error at end: Expect ';' after value.\n")

    def test_recovery_reports_each_error(self):
        statements, reporter, err = parse_source("print ;\nvar x = 1;\nvar = 2;\nprint x;")
        self.assertTrue(reporter.had_error)
        self.assertEqual(err.splitlines(), [
            "[line 1] error at ';': Expect expression.",
            "[line 3] error at '=': Expect variable name.",
        ])
        self.assertEqual(AstPrinter().print_program(statements), "(var x = 1)\n(print x)")

    def test_recovery_stops_at_statement_keyword(self):
        statements, _, err = parse_source("var a = (1 + ;\nprint 2;")
        self.assertIn("[line 1] error at ';': Expect expression.", err)
        self.assertEqual(AstPrinter().print_program(statements), "(print 2)")

    def test_unclosed_block(self):
        _, reporter, err = parse_source("{ print 1;")
        self.assertTrue(reporter.had_error)
        self.assertIn("Expect '}' after block.", err)

    def test_too_many_arguments(self):
        args = ", ".join(["1"] * 256)
        statements, reporter, err = parse_source(f"f({args});")
        self.assertTrue(reporter.had_error)
        self.assertIn("Can't have more than 255 arguments.", err)
        self.assertEqual(len(statements[0].expression.arguments), 256)


if __name__ == '__main__':
    unittest.main()
