from typing import Dict, Any, Optional

from .tokens import Token
from .errors import LoxRuntimeError

class Environment:
    """
    One scope of the variable chain, linked to the scope that encloses it.

    A scope created for a block or a call is dropped when that block or call
    finishes, unless a closure created inside it still refers to it.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing: Optional['Environment'] = enclosing

    def __contains__(self, name: str) -> bool:
        """Whether `name` is bound in this scope (enclosing scopes are not searched)."""
        return name in self.values

    def define(self, name: Token, value: Any):
        """
        Binds a new variable in the current scope.
        Shadowing an enclosing binding is fine; redefining one in the same scope is not.
        """
        if name.lexeme in self.values:
            raise LoxRuntimeError.at(name, f"Variable '{name.lexeme}' is already defined in this scope.")
        self.values[name.lexeme] = value

    def get(self, name: Token) -> Any:
        """
        Retrieves the value of a variable.
        If not found in the current scope, it checks the enclosing scope.
        """
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError.at(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any) -> Any:
        """
        Assigns a new value to the nearest existing binding of `name`
        and returns the value.
        """
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return value
            environment = environment.enclosing

        raise LoxRuntimeError.at(name, f"Undefined variable '{name.lexeme}'.")
