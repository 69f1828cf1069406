"""Tree-walking interpreter for the Lox scripting language."""
from .errors import ErrorReporter, LoxRuntimeError
from .interpreter import Interpreter
from .lexer import LoxLexer, scan
from .parser import Parser, parse
from .resolver import Resolver, resolve
from .session import Session

__version__ = "0.1.0"
