import sys
from typing import List, Optional

from .lexer import scan
from .parser import Parser
from .interpreter import Interpreter
from .ast_printer import AstPrinter
from .errors import LoxError, LexError, LoxRuntimeError, LoxSyntaxError

USAGE = "Usage: lox [--tokens] [--ast] [script]"

EXIT_USAGE = 64
EXIT_SYNTAX_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_RUNTIME_ERROR = 70

# Each Lox call or nesting level costs several Python frames.
RECURSION_LIMIT = 10000


def new_interpreter(interactive: bool = False) -> Interpreter:
    """Creates the state that persists across the units of one run or session."""
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)
    return Interpreter(interactive=interactive)


def run(source: str, interpreter: Interpreter, show_tokens: bool = False, show_ast: bool = False):
    """
    Scans, parses and executes one unit of source (a file, or one prompt line).

    If the unit does not scan or parse, nothing in it is executed and a
    LoxSyntaxError carrying every error found is raised. Runtime errors
    propagate as LoxRuntimeError.
    """
    try:
        tokens = scan(source)
    except LexError as error:
        raise LoxSyntaxError([error]) from None

    if show_tokens:
        for token in tokens:
            print(token)

    parser = Parser(tokens, interactive=interpreter.interactive)
    statements = parser.parse()
    if parser.errors:
        raise LoxSyntaxError(list(parser.errors))

    if show_ast:
        print(AstPrinter().print_program(statements))

    interpreter.interpret(statements)


class Lox:
    """
    Runs Lox source for the command line: a whole script, or an interactive
    prompt that keeps one interpreter alive across lines.
    """
    def __init__(self, interactive: bool = False, show_tokens: bool = False, show_ast: bool = False):
        self.interpreter = new_interpreter(interactive)
        self.show_tokens = show_tokens
        self.show_ast = show_ast
        self.had_error = False
        self.had_runtime_error = False

    def run(self, source: str):
        try:
            run(source, self.interpreter, self.show_tokens, self.show_ast)
        except LoxSyntaxError as failure:
            for error in failure.errors:
                self._report(error)
            self.had_error = True
        except LoxRuntimeError as error:
            self._report(error)
            self.had_runtime_error = True

    def run_file(self, path: str):
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
        self.run(source)

    def run_prompt(self):
        print("Lox REPL (Ctrl+D to exit)")
        while True:
            try:
                line = input("> ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting.")
                break
            if not line.strip(): continue
            self.run(line)
            # A bad line doesn't end the session.
            self.had_error = False
            self.had_runtime_error = False

    def _report(self, error: LoxError):
        print(error, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    show_tokens = '--tokens' in args
    show_ast = '--ast' in args
    scripts = [arg for arg in args if arg not in ('--tokens', '--ast')]

    if len(scripts) > 1 or any(arg.startswith('--') for arg in scripts):
        print(USAGE)
        return EXIT_USAGE

    if not scripts:
        Lox(interactive=True, show_tokens=show_tokens, show_ast=show_ast).run_prompt()
        return 0

    lox = Lox(show_tokens=show_tokens, show_ast=show_ast)
    try:
        lox.run_file(scripts[0])
    except OSError as error:
        print(f"Could not open file '{scripts[0]}': {error.strerror}", file=sys.stderr)
        return EXIT_NO_INPUT
    if lox.had_error: return EXIT_SYNTAX_ERROR
    if lox.had_runtime_error: return EXIT_RUNTIME_ERROR
    return 0


if __name__ == "__main__":
    sys.exit(main())
