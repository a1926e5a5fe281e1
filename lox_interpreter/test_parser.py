from .lexer import Lexer
from .parser import Parser
from .ast_printer import AstPrinter
from .errors import ParseError
from . import ast_nodes as ast


def parse(source, interactive=False):
    parser = Parser(Lexer(source).scan_tokens(), interactive=interactive)
    statements = parser.parse()
    return statements, parser.errors


def run_parser_test(source_code, expected_ast_str, interactive=False):
    """
    Runs a full lexer -> parser -> ast_printer test.
    """
    statements, errors = parse(source_code, interactive)
    assert errors == []

    actual_ast_str = AstPrinter().print_program(statements)

    # Normalize by stripping whitespace from each line and joining
    normalized_actual = "\n".join(line.strip() for line in actual_ast_str.strip().split('\n'))
    normalized_expected = "\n".join(line.strip() for line in expected_ast_str.strip().split('\n'))
    assert normalized_actual == normalized_expected


def run_parser_error_test(source_code, expected_message, expected_near, interactive=False):
    _, errors = parse(source_code, interactive)
    assert len(errors) == 1
    assert expected_message in errors[0].message
    assert errors[0].near == expected_near
    return errors[0]


def test_variable_declaration_and_precedence():
    run_parser_test("var x = 10 * (2 + 3);", "(var x (* 10 (group (+ 2 3))))")


def test_expression_statement_with_equality():
    run_parser_test("1 + 1 == 2;", "(expr_stmt (== (+ 1 1) 2))")
    run_parser_test("1 < 2 != false;", "(expr_stmt (!= (< 1 2) false))")


def test_declaration_without_initializer():
    run_parser_test("var y;", "(var y)")


def test_binary_operators_are_left_associative():
    run_parser_test("1 - 2 - 3;", "(expr_stmt (- (- 1 2) 3))")
    run_parser_test("8 / 4 * 2;", "(expr_stmt (* (/ 8 4) 2))")


def test_assignment_is_right_associative():
    run_parser_test("a = b = c;", "(expr_stmt (assign a (assign b c)))")


def test_logical_precedence():
    run_parser_test("a or b and c;", "(expr_stmt (or a (and b c)))")
    run_parser_test("a and b or c;", "(expr_stmt (or (and a b) c))")


def test_unary_operators():
    run_parser_test("-!x;", "(expr_stmt (- (! x)))")


def test_call_with_arguments():
    run_parser_test('print f(1, "s", nil);', '(print (call f 1 "s" nil))')
    run_parser_test("g();", "(expr_stmt (call g))")


def test_empty_statement():
    run_parser_test(";", "(empty)")


def test_dangling_else_binds_to_nearest_if():
    run_parser_test(
        "if (a) if (b) print 1; else print 2;",
        "(if a (if b (print 1) else (print 2)))",
    )


def test_function_declaration():
    run_parser_test("fun add(a, b) { return a + b; }", """
    (fun add(a, b) {
      (return (+ a b))
    })
    """)


def test_bare_return_yields_nil():
    run_parser_test("fun f() { return; }", """
    (fun f() {
      (return nil)
    })
    """)


def test_for_loop_is_desugared():
    statements, errors = parse("for (var i = 0; i < 3; i = i + 1) print i;")
    assert errors == []

    [outer] = statements
    assert isinstance(outer, ast.Block)
    initializer, loop = outer.statements
    assert isinstance(initializer, ast.Var)
    assert isinstance(loop, ast.While)
    assert isinstance(loop.condition, ast.Binary)

    body, increment = loop.body.statements
    assert isinstance(body, ast.Print)
    assert isinstance(increment, ast.Expression)
    assert isinstance(increment.expression, ast.Assign)


def test_for_loop_without_clauses():
    statements, errors = parse("for (;;) break;")
    assert errors == []

    [loop] = statements
    assert isinstance(loop, ast.While)
    assert loop.condition == ast.Literal(True)
    assert isinstance(loop.body, ast.Break)


def test_missing_closing_paren():
    run_parser_error_test("(1 + 2;", "Expect ')' after expression.", ";")


def test_missing_closing_brace_at_end():
    error = run_parser_error_test("{ print 1;", "Expect '}' after block.", "end")
    assert str(error) == "[line 1] Parse error at end: Expect '}' after block."


def test_missing_semicolon():
    run_parser_error_test("print 1", "Expect ';' after value.", "end")
    run_parser_error_test("1 + 2", "Expect ';' after expression.", "end")


def test_interactive_expression_may_omit_semicolon():
    run_parser_test('"foo" + 1', '(expr_stmt (+ "foo" 1))', interactive=True)
    run_parser_error_test("1 + 2 3", "Expect ';' after expression.", "3", interactive=True)


def test_invalid_assignment_target():
    run_parser_error_test("1 + 2 = 3;", "Unexpected token", "=")


def test_chained_calls_are_not_supported():
    run_parser_error_test("f(1)(2);", "Expect ';' after expression.", "(")


def test_duplicate_parameter():
    run_parser_error_test("fun f(a, a) {}", "Duplicate parameter name.", "a")


def test_recovers_and_reports_multiple_errors():
    source = "var = 1;\nprint 2;\nvar y = ;\nprint 3;"
    statements, errors = parse(source)

    assert [e.line for e in errors] == [1, 3]
    assert errors[0].message == "Expect variable name."
    assert errors[1].message == "Expect expression."
    assert AstPrinter().print_program(statements) == "(print 2)\n(print 3)"


def test_iteration_yields_statements_and_errors_in_order():
    parser = Parser(Lexer("print 1; print ; print 2;").scan_tokens())
    results = list(parser)

    assert [type(r) for r in results] == [ast.Print, ParseError, ast.Print]
    assert parser.errors == [results[1]]


def test_recovery_skips_the_offending_token():
    statements, errors = parse("print (1 + 2\nvar x = 1;")

    assert len(errors) == 1
    assert errors[0].near == "var"
    # The token that triggered the error is skipped along with the statement.
    assert statements == []

    statements, errors = parse("1 + * 2 print 3;")
    assert len(errors) == 1
    assert AstPrinter().print_program(statements) == "(print 3)"


def test_nesting_too_deep_is_a_parse_error():
    depth = 5000
    source = "print " + "(" * depth + "1" + ")" * depth + ";\nprint 2;"
    statements, errors = parse(source)

    assert len(errors) == 1
    assert errors[0].message == "Expression nests too deeply."
    assert errors[0].line == 1
    assert AstPrinter().print_program(statements) == "(print 2)"
