from abc import ABC, abstractmethod
from typing import List, Any, TYPE_CHECKING

from . import ast_nodes as ast
from .environment import Environment
from .errors import LoxRuntimeError, BreakSignal, ReturnSignal

# This is a common pattern to break circular import cycles.
# The import is only done for static type checking, not at runtime.
if TYPE_CHECKING:
    from .interpreter import Interpreter


class LoxCallable(ABC):
    """
    An abstract base class for all objects that can be called like a function.
    """
    @abstractmethod
    def arity(self) -> int:
        """Returns the number of arguments the callable expects."""
        raise NotImplementedError

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        """Executes the callable's logic."""
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """
    A user-defined function together with the scope it was declared in.
    The declaration node, and so the parameter list and body, is shared by
    every call rather than copied.
    """
    def __init__(self, declaration: ast.Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure # The environment where the function was declared.

    def arity(self) -> int:
        """The number of parameters the function declares."""
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        """
        Executes the function. This involves creating a new environment for the
        function's scope, binding arguments to parameters, and then executing
        the function's body.
        """
        # The call scope encloses the function's closure, not the caller's
        # environment. This is what enables lexical scoping.
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param, argument)

        signal = interpreter.execute_block(self.declaration.body.statements, environment)
        if isinstance(signal, ReturnSignal):
            return signal.value
        if isinstance(signal, BreakSignal):
            raise LoxRuntimeError(signal.line, "Cannot break outside of a loop.", "break")

        # If no 'return' is encountered, functions implicitly return nil.
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"
