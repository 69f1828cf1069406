import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from loxlang.main import main
from loxlang.session import Session
from loxlang.shell import Shell


class MainTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def script(self, source):
        path = os.path.join(self.tmpdir, "script.lox")
        with open(path, "w", encoding="utf-8") as f:
            f.write(source)
        return path

    def run_main(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_run_file(self):
        code, out, err = self.run_main([self.script('var greeting = "hello"; print greeting;')])
        self.assertEqual(code, 0)
        self.assertEqual(out, "hello\n")
        self.assertEqual(err, "")

    def test_static_error_exit_code(self):
        code, out, err = self.run_main([self.script("print 1;\nvar 1 = 2;")])
        self.assertEqual(code, 65)
        self.assertEqual(out, "")
        self.assertEqual(err, "[line 2] error at '1': Expect variable name.\n")

    def test_runtime_error_exit_code(self):
        code, out, err = self.run_main([self.script('print "a";\nprint 1 + nil;')])
        self.assertEqual(code, 70)
        self.assertEqual(out, "a\n")
        self.assertEqual(err, "Operands must be two numbers or two strings.\n[line 2]\n")

    def test_missing_file(self):
        code, _, err = self.run_main([os.path.join(self.tmpdir, "missing.lox")])
        self.assertEqual(code, 66)
        self.assertIn("could not read", err)

    def test_invalid_invocation(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(["one.lox", "two.lox"])
        self.assertEqual(ctx.exception.code, 64)

        with self.assertRaises(SystemExit) as ctx:
            self.run_main(["--tokens"])
        self.assertEqual(ctx.exception.code, 64)

    def test_tokens_mode(self):
        code, out, _ = self.run_main(["--tokens", self.script("var x = 1;")])
        self.assertEqual(code, 0)
        self.assertIn("IDENTIFIER", out)
        self.assertIn("EOF", out)

    def test_ast_mode(self):
        code, out, _ = self.run_main(["--ast", self.script("print 1 + 2;")])
        self.assertEqual(code, 0)
        self.assertEqual(out, "(print (+ 1 2))\n")

    def test_check_mode(self):
        code, out, _ = self.run_main(["--check", self.script("print -\"a\";")])
        self.assertEqual(code, 0)
        self.assertIn("OK", out)

        code, _, err = self.run_main(["--check", self.script("return;")])
        self.assertEqual(code, 65)
        self.assertIn("Can't return from top-level code.", err)


class ShellTestCase(unittest.TestCase):

    def test_lines_share_globals_and_survive_errors(self):
        out, err = io.StringIO(), io.StringIO()
        sess = Session(out=out, err=err)
        stdin = io.StringIO("var a = 1;\nprint a;\nprint ;\nprint nope;\n\nprint a + 1;\n")
        shell = Shell(sess, stdin=stdin, stdout=io.StringIO())
        shell.use_rawinput = False
        shell.cmdloop(intro="")

        self.assertEqual(out.getvalue(), "1\n2\n")
        self.assertIn("Expect expression.", err.getvalue())
        self.assertIn("Undefined variable 'nope'.", err.getvalue())
        self.assertFalse(sess.reporter.had_error)

    def test_deeply_nested_line_keeps_prompt_alive(self):
        out, err = io.StringIO(), io.StringIO()
        deep = "print " + "(" * 3000 + "1" + ")" * 3000 + ";"
        shell = Shell(Session(out=out, err=err),
                      stdin=io.StringIO(deep + "\nprint 2;\n"), stdout=io.StringIO())
        shell.use_rawinput = False
        shell.cmdloop(intro="")
        self.assertEqual(out.getvalue(), "2\n")
        self.assertIn("Source is nested too deeply.", err.getvalue())

    def test_command_names_are_ordinary_identifiers(self):
        out, err = io.StringIO(), io.StringIO()
        stdin = io.StringIO("var help = 1;\nprint help;\nhelp = 2;\nprint help;\n"
                            "var exit = 3;\nexit = exit + 1;\nprint exit;\n")
        shell = Shell(Session(out=out, err=err), stdin=stdin, stdout=io.StringIO())
        shell.use_rawinput = False
        shell.cmdloop(intro="")
        self.assertEqual(out.getvalue(), "1\n2\n4\n")
        self.assertEqual(err.getvalue(), "")

    def test_bare_help(self):
        prompt = io.StringIO()
        out = io.StringIO()
        shell = Shell(Session(out=out, err=io.StringIO()),
                      stdin=io.StringIO("help\n"), stdout=prompt)
        shell.use_rawinput = False
        shell.cmdloop(intro="")
        self.assertIn("Each line is run as a Lox program", prompt.getvalue())
        self.assertEqual(out.getvalue(), "")

    def test_exit(self):
        out = io.StringIO()
        shell = Shell(Session(out=out, err=io.StringIO()),
                      stdin=io.StringIO("print 1;\nexit\nprint 2;\n"), stdout=io.StringIO())
        shell.use_rawinput = False
        shell.cmdloop(intro="")
        self.assertEqual(out.getvalue(), "1\n")


if __name__ == '__main__':
    unittest.main()
