from decimal import Decimal
from typing import List, Any

from . import ast_nodes as ast
from .tokens import Token, TokenType
from .errors import LoxRuntimeError, Signal, NORMAL, BreakSignal, ReturnSignal
from .environment import Environment
from .callables import LoxCallable, LoxFunction


# --- Value model ---
# nil is None, booleans are bool, numbers are always float, strings are str,
# and functions are LoxCallable instances.

def is_truthy(value: Any) -> bool:
    """nil, false, 0 and the empty string are false; everything else is true."""
    if value is None: return False
    if isinstance(value, bool): return value
    if isinstance(value, float): return value != 0.0
    if isinstance(value, str): return value != ""
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Values of different kinds are never equal; functions only equal themselves."""
    if type(a) is not type(b):
        return False
    if isinstance(a, LoxCallable):
        return a is b
    return a == b


def format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if 'e' in text:
        # Positional notation instead of e.g. '1e-07'.
        return format(Decimal(text), 'f')
    return text


def stringify(value: Any) -> str:
    """The display form used by 'print' and string concatenation."""
    if value is None: return "nil"
    if isinstance(value, bool): return "true" if value else "false"
    if isinstance(value, float): return format_number(value)
    return str(value)


def _describe(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    return stringify(value)


class Interpreter:
    """
    The Interpreter walks the AST and executes the code.

    Statement execution returns a control-flow signal (NORMAL, BreakSignal or
    ReturnSignal); genuine runtime errors are raised as LoxRuntimeError.
    The global environment lives as long as the interpreter, so declarations
    made by one `interpret` call are visible to the next.
    """
    def __init__(self, interactive: bool = False):
        self.environment = Environment()
        self.interactive = interactive

    def interpret(self, statements: List[ast.Stmt]):
        """Executes top-level statements in order, stopping at the first runtime error."""
        for statement in statements:
            signal = self.execute(statement)
            if isinstance(signal, BreakSignal):
                raise LoxRuntimeError(signal.line, "Cannot break outside of a loop.", "break")
            if isinstance(signal, ReturnSignal):
                raise LoxRuntimeError(signal.line, "Cannot return from top-level code.", "return")

    # --- STATEMENTS ---

    def execute(self, stmt: ast.Stmt) -> Signal:
        match stmt:
            case ast.Empty():
                return NORMAL

            case ast.Expression(expression):
                value = self.evaluate(expression)
                if self.interactive:
                    print(stringify(value))
                return NORMAL

            case ast.Print(expression):
                print(stringify(self.evaluate(expression)))
                return NORMAL

            case ast.Var(name, initializer):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.environment.define(name, value)
                return NORMAL

            case ast.Block(statements):
                return self.execute_block(statements, Environment(self.environment))

            case ast.If(condition, then_branch, else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)
                return NORMAL

            case ast.While(condition, body):
                while is_truthy(self.evaluate(condition)):
                    signal = self.execute(body)
                    if isinstance(signal, BreakSignal):
                        break
                    if signal is not NORMAL:
                        return signal
                return NORMAL

            case ast.Break(keyword):
                return BreakSignal(keyword.line)

            case ast.Function(name):
                # Bound before the body can ever run, so the function can call itself.
                self.environment.define(name, LoxFunction(stmt, self.environment))
                return NORMAL

            case ast.Return(keyword, value):
                return ReturnSignal(keyword.line, self.evaluate(value))

        raise TypeError(f"Unknown statement node: {stmt!r}")

    def execute_block(self, statements: List[ast.Stmt], environment: Environment) -> Signal:
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                signal = self.execute(statement)
                if signal is not NORMAL:
                    return signal
            return NORMAL
        finally:
            self.environment = previous

    # --- EXPRESSIONS ---

    def evaluate(self, expr: ast.Expr) -> Any:
        match expr:
            case ast.Literal(value):
                return value

            case ast.Grouping(expression):
                return self.evaluate(expression)

            case ast.Unary(operator, right):
                return self._unary(operator, self.evaluate(right))

            case ast.Binary(left, operator, right):
                return self._binary(self.evaluate(left), operator, self.evaluate(right))

            case ast.Logical(left, operator, right):
                left_value = is_truthy(self.evaluate(left))
                if operator.token_type == TokenType.OR:
                    if left_value: return True
                elif not left_value:
                    return False
                return is_truthy(self.evaluate(right))

            case ast.Variable(name):
                return self.environment.get(name)

            case ast.Assign(name, value):
                return self.environment.assign(name, self.evaluate(value))

            case ast.Call(callee, paren, arguments):
                return self._call(self.evaluate(callee), paren, [self.evaluate(a) for a in arguments])

        raise TypeError(f"Unknown expression node: {expr!r}")

    def _unary(self, operator: Token, right: Any) -> Any:
        if operator.token_type == TokenType.BANG:
            return not is_truthy(right)

        if not isinstance(right, float):
            raise LoxRuntimeError(operator.line, "Operand must be a number.", f"-{_describe(right)}")
        return -right

    def _binary(self, left: Any, operator: Token, right: Any) -> Any:
        op_type = operator.token_type
        near = f"{_describe(left)} {operator.lexeme} {_describe(right)}"

        if op_type == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op_type == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op_type == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise LoxRuntimeError(operator.line, "Operands must be two numbers or include a string.", near)

        if op_type in (TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL):
            both_numbers = isinstance(left, float) and isinstance(right, float)
            both_strings = isinstance(left, str) and isinstance(right, str)
            if not (both_numbers or both_strings):
                raise LoxRuntimeError(operator.line, "Operands must be two numbers or two strings.", near)
            match op_type:
                case TokenType.GREATER: return left > right
                case TokenType.GREATER_EQUAL: return left >= right
                case TokenType.LESS: return left < right
                case TokenType.LESS_EQUAL: return left <= right

        if not (isinstance(left, float) and isinstance(right, float)):
            raise LoxRuntimeError(operator.line, "Operands must be numbers.", near)

        match op_type:
            case TokenType.MINUS:
                return left - right
            case TokenType.STAR:
                return left * right
            case TokenType.SLASH:
                if right == 0.0:
                    raise LoxRuntimeError(operator.line, "divide by zero", near)
                return left / right

        raise LoxRuntimeError(operator.line, "Unknown binary operator.", operator.lexeme)

    def _call(self, callee: Any, paren: Token, arguments: List[Any]) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren.line, "Value is not callable.", _describe(callee))

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                paren.line,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
                str(callee),
            )

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(paren.line, "Stack overflow.", str(callee)) from None
