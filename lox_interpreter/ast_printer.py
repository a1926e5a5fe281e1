from . import ast_nodes as ast

class AstPrinter:
    """
    A utility class to print the AST in a readable Lisp-like format.
    This is extremely useful for debugging the parser.
    """
    def print_program(self, statements: list[ast.Stmt]) -> str:
        return "\n".join(self.print_stmt(stmt) for stmt in statements)

    # --- Statements ---

    def print_stmt(self, stmt: ast.Stmt) -> str:
        match stmt:
            case ast.Empty():
                return "(empty)"
            case ast.Expression(expression):
                return self._parenthesize("expr_stmt", expression)
            case ast.Print(expression):
                return self._parenthesize("print", expression)
            case ast.Var(name, None):
                return f"(var {name.lexeme})"
            case ast.Var(name, initializer):
                return self._parenthesize(f"var {name.lexeme}", initializer)
            case ast.Block(statements):
                lines = ["(block"]
                for statement in statements:
                    # This is a simple representation. A real pretty printer would handle indentation better.
                    lines.append(f"  {self.print_stmt(statement)}")
                lines.append(")")
                return "\n".join(lines)
            case ast.If(condition, then_branch, else_branch):
                parts = ["(if ", self.print_expr(condition), " ", self.print_stmt(then_branch)]
                if else_branch is not None:
                    parts.append(" else ")
                    parts.append(self.print_stmt(else_branch))
                parts.append(")")
                return "".join(parts)
            case ast.While(condition, body):
                return f"(while {self.print_expr(condition)} {self.print_stmt(body)})"
            case ast.Break():
                return "(break)"
            case ast.Function(name, params, body):
                param_str = ", ".join(p.lexeme for p in params)
                lines = [f"(fun {name.lexeme}({param_str}) {{"]
                for statement in body.statements:
                    lines.append(f"  {self.print_stmt(statement)}")
                lines.append("})")
                return "\n".join(lines)
            case ast.Return(_, value):
                return self._parenthesize("return", value)
        raise TypeError(f"Unknown statement node: {stmt!r}")

    # --- Expressions ---

    def print_expr(self, expr: ast.Expr) -> str:
        match expr:
            case ast.Literal(None):
                return "nil"
            case ast.Literal(bool() as value):
                return str(value).lower()
            case ast.Literal(str() as value):
                return f'"{value}"'
            case ast.Literal(float() as value) if value.is_integer():
                return str(int(value))
            case ast.Literal(value):
                return str(value)
            case ast.Grouping(expression):
                return self._parenthesize("group", expression)
            case ast.Unary(operator, right):
                return self._parenthesize(operator.lexeme, right)
            case ast.Binary(left, operator, right) | ast.Logical(left, operator, right):
                return self._parenthesize(operator.lexeme, left, right)
            case ast.Variable(name):
                return name.lexeme
            case ast.Assign(name, value):
                return self._parenthesize(f"assign {name.lexeme}", value)
            case ast.Call(callee, _, arguments):
                return self._parenthesize("call", callee, *arguments)
        raise TypeError(f"Unknown expression node: {expr!r}")

    # --- Helper Method ---

    def _parenthesize(self, name: str, *parts: ast.Expr) -> str:
        """Helper to format a node and its children."""
        result = [f"({name}"]
        for part in parts:
            result.append(f" {self.print_expr(part)}")
        result.append(")")
        return "".join(result)
