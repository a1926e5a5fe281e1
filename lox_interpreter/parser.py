from typing import Iterator, List, Union

from .tokens import Token, TokenType
from .errors import ParseError, near
from . import ast_nodes as ast


MAX_ARGUMENTS = 255

# Tokens that begin a new statement; error recovery stops in front of them.
STATEMENT_STARTS = (
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
)


class Parser:
    """
    The Parser consumes a stream of tokens and produces statements one at a time.

    Iterating a parser yields, for every top-level statement, either the parsed
    `ast.Stmt` or the `ParseError` that stopped it. After an error the parser
    skips ahead to the next statement boundary, so a single pass can report
    several independent syntax errors.

    In interactive mode the ';' after a trailing expression statement may be
    left out, so a prompt line like `1 + 2` parses.
    """
    def __init__(self, tokens: List[Token], interactive: bool = False):
        self.tokens: List[Token] = tokens
        self.current: int = 0
        self.interactive = interactive
        self.errors: List[ParseError] = []

    def __iter__(self) -> Iterator[Union[ast.Stmt, ParseError]]:
        while not self._is_at_end():
            try:
                statement = self._declaration()
            except ParseError as error:
                failure = error
            except RecursionError:
                failure = self._error(self._peek(), "Expression nests too deeply.")
            else:
                yield statement
                continue

            self.errors.append(failure)
            self._synchronize()
            yield failure

    def parse(self) -> List[ast.Stmt]:
        """Parses every statement; errors are collected in `self.errors`."""
        return [item for item in self if not isinstance(item, ParseError)]

    # --- GRAMMAR RULE IMPLEMENTATIONS ---

    def _declaration(self) -> ast.Stmt:
        if self._match(TokenType.FUN):
            return self._function()
        if self._match(TokenType.VAR):
            return self._var_declaration()
        return self._statement()

    def _var_declaration(self) -> ast.Stmt:
        """Parses a variable declaration: 'var' IDENTIFIER ('=' expression)? ';'"""
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def _statement(self) -> ast.Stmt:
        """Parses a statement, dispatching on its leading token."""
        if self._match(TokenType.SEMICOLON):
            return ast.Empty(self._previous().line)
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.LEFT_BRACE):
            return ast.Block(self._block())
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.BREAK):
            return self._break_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        return self._expression_statement()

    def _print_statement(self) -> ast.Stmt:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def _if_statement(self) -> ast.Stmt:
        """Parses an if-else statement. A dangling 'else' binds to the nearest 'if'."""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._statement()

        return ast.If(condition, then_branch, else_branch)

    def _while_statement(self) -> ast.Stmt:
        """Parses a while loop."""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after while condition.")
        body = self._statement()

        return ast.While(condition, body)

    def _for_statement(self) -> ast.Stmt:
        """
        Parses a for loop and desugars it into:
            { initializer; while (condition) { body; increment; } }
        """
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        # Initializer
        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        # Condition
        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        # Increment
        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()

        # Desugaring
        if increment is not None:
            body = ast.Block([body, ast.Expression(increment)])

        if condition is None:
            condition = ast.Literal(True)
        body = ast.While(condition, body)

        if initializer is not None:
            body = ast.Block([initializer, body])

        return body

    def _break_statement(self) -> ast.Stmt:
        keyword = self._previous()
        self._consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
        return ast.Break(keyword)

    def _return_statement(self) -> ast.Stmt:
        """Parses a return statement; a bare 'return;' returns nil."""
        keyword = self._previous()
        value: ast.Expr = ast.Literal(None)
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    def _function(self) -> ast.Function:
        """Parses a function declaration: 'fun' IDENTIFIER '(' parameters? ')' block"""
        name = self._consume(TokenType.IDENTIFIER, "Expect function name.")
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after function name.")

        parameters: List[Token] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(parameters) >= MAX_ARGUMENTS:
                    raise self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")

                param = self._consume(TokenType.IDENTIFIER, "Expect parameter name.")
                if any(p.lexeme == param.lexeme for p in parameters):
                    raise self._error(param, "Duplicate parameter name.")
                parameters.append(param)

                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self._consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
        body = ast.Block(self._block())
        return ast.Function(name, parameters, body)

    def _block(self) -> List[ast.Stmt]:
        """Parses the statements of a block; the opening '{' is already consumed."""
        statements: List[ast.Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            statements.append(self._declaration())

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> ast.Stmt:
        """Parses an expression statement: expression ';'"""
        expr = self._expression()
        if not self._match(TokenType.SEMICOLON):
            if not (self.interactive and self._is_at_end()):
                raise self._error(self._peek(), "Expect ';' after expression.")
        return ast.Expression(expr)

    def _expression(self) -> ast.Expr:
        """Parses an expression. Entry point for all expression rules."""
        return self._assignment()

    def _assignment(self) -> ast.Expr:
        """Parses a right-associative assignment: IDENTIFIER '=' assignment"""
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)

            raise self._error(equals, "Unexpected token; invalid assignment target.")

        return expr

    def _or(self) -> ast.Expr:
        """Parses logical OR expressions."""
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            right = self._and()
            expr = ast.Logical(expr, operator, right)
        return expr

    def _and(self) -> ast.Expr:
        """Parses logical AND expressions."""
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            right = self._equality()
            expr = ast.Logical(expr, operator, right)
        return expr

    def _equality(self) -> ast.Expr:
        """Parses an equality expression (==, !=)."""
        expr = self._comparison()
        while self._match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self._previous()
            right = self._comparison()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _comparison(self) -> ast.Expr:
        """Parses comparison expressions (>, >=, <, <=)."""
        expr = self._term()
        while self._match(TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self._previous()
            right = self._term()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _term(self) -> ast.Expr:
        """Parses addition and subtraction expressions (+, -)."""
        expr = self._factor()
        while self._match(TokenType.MINUS, TokenType.PLUS):
            operator = self._previous()
            right = self._factor()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _factor(self) -> ast.Expr:
        """Parses multiplication and division expressions (*, /)."""
        expr = self._unary()
        while self._match(TokenType.SLASH, TokenType.STAR):
            operator = self._previous()
            right = self._unary()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _unary(self) -> ast.Expr:
        """Parses unary expressions (e.g., -x, !y)."""
        if self._match(TokenType.MINUS, TokenType.BANG):
            operator = self._previous()
            right = self._unary()
            return ast.Unary(operator, right)
        return self._call()

    def _call(self) -> ast.Expr:
        """Parses a primary expression followed by at most one argument list."""
        expr = self._primary()

        if self._match(TokenType.LEFT_PAREN):
            arguments: List[ast.Expr] = []
            if not self._check(TokenType.RIGHT_PAREN):
                while True:
                    if len(arguments) >= MAX_ARGUMENTS:
                        raise self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                    arguments.append(self._expression())
                    if not self._match(TokenType.COMMA):
                        break

            paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
            expr = ast.Call(expr, paren, arguments)

        return expr

    def _primary(self) -> ast.Expr:
        """Parses primary expressions (literals, grouping, identifiers)."""
        if self._match(TokenType.FALSE): return ast.Literal(False)
        if self._match(TokenType.TRUE): return ast.Literal(True)
        if self._match(TokenType.NIL): return ast.Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(self._previous().literal)

        if self._match(TokenType.IDENTIFIER):
            return ast.Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self._error(self._peek(), "Expect expression.")

    # --- TOKEN CONSUMPTION & UTILITY METHODS ---

    def _match(self, *types: TokenType) -> bool:
        """
        Checks if the current token has any of the given types.
        If so, it consumes the token and returns True.
        """
        for token_type in types:
            if self._check(token_type):
                self._advance()
                return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Checks if the current token is of the given type without consuming it."""
        if self._is_at_end():
            return False
        return self._peek().token_type == token_type

    def _advance(self) -> Token:
        """Consumes the current token and returns it."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        """Checks if we have run out of tokens to parse."""
        return self._peek().token_type == TokenType.EOF

    def _peek(self) -> Token:
        """Returns the current token without consuming it."""
        return self.tokens[self.current]

    def _previous(self) -> Token:
        """Returns the most recently consumed token."""
        return self.tokens[self.current - 1]

    # --- ERROR HANDLING & SYNCHRONIZATION ---

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """
        Consumes a token of a specific type. If the next token is not of the
        expected type, it raises a ParseError.
        """
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _error(self, token: Token, message: str) -> ParseError:
        """Creates and returns a ParseError located at `token`."""
        return ParseError(token.line, message, near(token))

    def _synchronize(self):
        """
        Error recovery. Discards tokens until it finds a statement boundary,
        which helps the parser continue after a syntax error.
        """
        self._advance()
        while not self._is_at_end():
            if self._previous().token_type == TokenType.SEMICOLON:
                return

            if self._peek().token_type in STATEMENT_STARTS:
                return

            self._advance()
