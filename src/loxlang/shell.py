"""Handles interactive mode for the Lox interpreter. Uses cmd as backend."""

import cmd

from .session import Session


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to quit."
    prompt = "> "
    commands = ("help", "exit", "EOF")  # only when alone on a line

    def __init__(self, sess: Session, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess

    def onecmd(self, line):
        """Sends every line to the interpreter unless it is a bare shell command."""
        stripped = line.strip()
        if not stripped:
            return self.emptyline()
        if stripped in self.commands:
            return super().onecmd(stripped)
        return self.default(line)

    def default(self, line):
        """Runs one line of Lox against the session's global frame."""
        self.sess.run(line)
        # a bad line must not poison the next one
        self.sess.reporter.reset()

    def do_help(self, arg):
        """Prints a short usage note for the prompt."""
        self.stdout.write("Each line is run as a Lox program; variables and functions persist\n"
                          "between lines. Try 'var greeting = \"hi\";' then 'print greeting;'.\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
