"""
Tests for the Lark frontend: statement forms, precedence, literals,
functions and parse failures.
"""

import pytest

from jsviz.shared.errors import ParseFailure
from jsviz.shared.nodes import (
    ArrayExpression, ArrowFunctionExpression, AssignmentExpression, BinaryExpression,
    BlockStatement, CallExpression, ConditionalExpression, DoWhileStatement,
    ExpressionStatement, ForStatement, FunctionDeclaration, FunctionExpression, Identifier,
    IfStatement, LogicalExpression, MemberExpression, ObjectExpression,
    ReturnStatement, SequenceExpression, SpreadElement, UnaryExpression,
    UnsupportedExpression, UnsupportedStatement, UpdateExpression, VariableDeclaration,
    WhileStatement,
)
from jsviz.shared.types import AssignmentOp, BinaryOp, LogicalOp, UnaryOp, UpdateOp, VariableKind


def _expr(parser, source):
    """Parse a single expression statement and return its expression."""
    program = parser.parse(source, "<test>")
    assert len(program.body) == 1
    stmt = program.body[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def _init(parser, source):
    """Initializer of the first declarator of a one-statement program."""
    decl = parser.parse(source, "<test>").body[0]
    assert isinstance(decl, VariableDeclaration)
    return decl.declarations[0].init


class TestStatements:
    """Statement forms"""

    def test_variable_declarations(self, parser):
        program = parser.parse("let a = 1, b; const c = 2\nvar d = 3", "<test>")
        kinds = [stmt.kind for stmt in program.body]
        assert kinds == [VariableKind.LET, VariableKind.CONST, VariableKind.VAR]
        first = program.body[0]
        assert [d.name for d in first.declarations] == ["a", "b"]
        assert first.declarations[1].init is None

    def test_optional_semicolons(self, parser):
        program = parser.parse("let x = 1\nx = 2\nx++", "<test>")
        assert len(program.body) == 3

    def test_function_declaration(self, parser):
        fn = parser.parse("function add(a, b) { return a + b; }", "<test>").body[0]
        assert isinstance(fn, FunctionDeclaration)
        assert fn.name == "add"
        assert fn.params == ["a", "b"]
        assert isinstance(fn.body[0], ReturnStatement)

    def test_if_else(self, parser):
        stmt = parser.parse("if (x > 1) { y = 1; } else y = 2;", "<test>").body[0]
        assert isinstance(stmt, IfStatement)
        assert isinstance(stmt.consequent, BlockStatement)
        assert isinstance(stmt.alternate, ExpressionStatement)

    def test_loops(self, parser):
        program = parser.parse(
            "while (i < 3) i++;\n"
            "do { i--; } while (i > 0);\n"
            "for (let j = 0; j < 2; j++) {}\n"
            "for (;;) { break; }",
            "<test>",
        )
        assert isinstance(program.body[0], WhileStatement)
        assert isinstance(program.body[1], DoWhileStatement)
        loop = program.body[2]
        assert isinstance(loop, ForStatement)
        assert isinstance(loop.init, VariableDeclaration)
        assert isinstance(loop.update, UpdateExpression)
        empty = program.body[3]
        assert empty.init is None and empty.test is None and empty.update is None

    def test_leading_brace_is_block(self, parser):
        stmt = parser.parse("{ let x = 1; }", "<test>").body[0]
        assert isinstance(stmt, BlockStatement)

    def test_comments_ignored(self, parser):
        program = parser.parse("// line\nlet x = 1; /* block\ncomment */ let y = 2;", "<test>")
        assert len(program.body) == 2

    def test_locations(self, parser):
        program = parser.parse("let a = 1;\n  a = 2;", "<test>")
        assign = program.body[1]
        assert assign.location.line == 2
        assert assign.location.column == 3
        assert assign.location.file == "<test>"


class TestExpressions:
    """Precedence and operator mapping"""

    def test_precedence(self, parser):
        expr = _expr(parser, "1 + 2 * 3;")
        assert isinstance(expr, BinaryExpression)
        assert expr.operator is BinaryOp.ADD
        assert expr.right.operator is BinaryOp.MUL

    def test_left_associative(self, parser):
        expr = _expr(parser, "10 - 4 - 3;")
        assert expr.operator is BinaryOp.SUB
        assert isinstance(expr.left, BinaryExpression)
        assert expr.right.value == 3

    def test_power_right_associative(self, parser):
        expr = _expr(parser, "2 ** 3 ** 2;")
        assert expr.operator is BinaryOp.POW
        assert isinstance(expr.right, BinaryExpression)

    def test_logical_and_ternary(self, parser):
        expr = _expr(parser, "a && b || c ? 1 : 2;")
        assert isinstance(expr, ConditionalExpression)
        assert isinstance(expr.test, LogicalExpression)
        assert expr.test.operator is LogicalOp.OR
        assert expr.test.left.operator is LogicalOp.AND

    def test_equality_operators(self, parser):
        assert _expr(parser, "a === b;").operator is BinaryOp.STRICT_EQ
        assert _expr(parser, "a != b;").operator is BinaryOp.NE
        assert _expr(parser, "a <= b;").operator is BinaryOp.LE

    def test_unary(self, parser):
        expr = _expr(parser, "!typeof x;")
        assert isinstance(expr, UnaryExpression)
        assert expr.operator is UnaryOp.NOT
        assert expr.argument.operator is UnaryOp.TYPEOF

    def test_updates(self, parser):
        prefix = _expr(parser, "++i;")
        postfix = _expr(parser, "i--;")
        assert prefix.prefix is True and prefix.operator is UpdateOp.INCREMENT
        assert postfix.prefix is False and postfix.operator is UpdateOp.DECREMENT

    def test_compound_assignment(self, parser):
        expr = _expr(parser, "total += 5;")
        assert isinstance(expr, AssignmentExpression)
        assert expr.operator is AssignmentOp.ADD
        assert isinstance(expr.target, Identifier)

    def test_member_and_call(self, parser):
        expr = _expr(parser, "obj.items[0](1, 2);")
        assert isinstance(expr, CallExpression)
        assert len(expr.arguments) == 2
        member = expr.callee
        assert isinstance(member, MemberExpression) and member.computed
        assert member.object.property == "items"

    def test_sequence_is_flat(self, parser):
        expr = _init(parser, "let s = (1, 2, 3);")
        assert isinstance(expr, SequenceExpression)
        assert [e.value for e in expr.expressions] == [1, 2, 3]

    def test_invalid_assignment_target(self, parser):
        with pytest.raises(ParseFailure) as exc:
            parser.parse("1 = 2;", "<test>")
        assert "Invalid left-hand side" in str(exc.value)


class TestLiterals:
    """Numbers, strings, arrays, objects"""

    def test_numbers(self, parser):
        assert _init(parser, "let n = 42;").value == 42
        assert _init(parser, "let n = 0x1F;").value == 31
        assert _init(parser, "let n = 2.5e3;").value == 2500
        assert _init(parser, "let n = .5;").value == 0.5

    def test_strings(self, parser):
        assert _init(parser, "let s = 'it\\'s';").value == "it's"
        assert _init(parser, 'let s = "a\\nb";').value == "a\nb"
        assert _init(parser, 'let s = "\\u0041\\x42";').value == "AB"

    def test_keyword_literals(self, parser):
        assert _init(parser, "let v = true;").value is True
        assert _init(parser, "let v = null;").value is None

    def test_array_with_spread(self, parser):
        arr = _init(parser, "let a = [1, ...rest, 3];")
        assert isinstance(arr, ArrayExpression)
        assert isinstance(arr.elements[1], SpreadElement)

    def test_object_keys(self, parser):
        obj = _init(parser, "let o = { a: 1, 'b c': 2, 3: 4, d };")
        assert isinstance(obj, ObjectExpression)
        assert [p.key for p in obj.properties] == ["a", "b c", "3", "d"]
        assert obj.properties[3].shorthand

    def test_identifier_with_keyword_prefix(self, parser):
        assert isinstance(_init(parser, "let v = letter;"), Identifier)


class TestFunctions:
    """Function expressions and arrows"""

    def test_function_expression(self, parser):
        fn = _init(parser, "const f = function named(x) { return x; };")
        assert isinstance(fn, FunctionExpression)
        assert fn.name == "named"
        assert fn.params == ["x"]

    def test_arrow_forms(self, parser):
        single = _init(parser, "const f = x => x * 2;")
        none = _init(parser, "const f = () => 1;")
        multi = _init(parser, "const f = (a, b) => { return a + b; };")
        assert isinstance(single, ArrowFunctionExpression)
        assert single.params == ["x"] and single.expression_body
        assert none.params == []
        assert multi.params == ["a", "b"] and not multi.expression_body

    def test_duplicate_arrow_params(self, parser):
        with pytest.raises(ParseFailure):
            parser.parse("const f = (a, a) => a;", "<test>")

    def test_invalid_arrow_params(self, parser):
        with pytest.raises(ParseFailure):
            parser.parse("const f = (a + 1) => a;", "<test>")


class TestUnsupportedSyntax:
    """Forms that parse into placeholders so the rest of the program still runs"""

    @pytest.mark.parametrize("source, feature", [
        ("try { a(); } catch (e) { b(); } finally { c(); }", "try statement"),
        ("try { a(); } finally { }", "try statement"),
        ("throw new Error('x');", "throw statement"),
        ("switch (x) { case 1: y = 1; break; default: y = 2; }", "switch statement"),
        ("class A extends B { constructor(a) { this.a = a; } static make() {} n = 1; }",
         "class declaration"),
        ("for (const k in obj) total++;", "for-in loop"),
        ("for (item of items) { total += item; }", "for-of loop"),
        ("outer: while (true) { break; }", "labelled statement"),
    ])
    def test_statement_placeholders(self, parser, source, feature):
        program = parser.parse(source + "\nlet after = 1;", "<test>")
        stmt, after = program.body
        assert isinstance(stmt, UnsupportedStatement)
        assert stmt.feature == feature
        assert stmt.location.line == 1
        assert isinstance(after, VariableDeclaration)

    def test_template_literal(self, parser):
        tpl = _init(parser, "const s = `a ${b}\n`;")
        assert isinstance(tpl, UnsupportedExpression)
        assert tpl.feature == "template literal"

    def test_contextual_words_stay_names(self, parser):
        program = parser.parse("let of = 1;\nconst o = { default: of, class: 2 };\no.default;", "<test>")
        assert program.body[0].declarations[0].name == "of"
        assert [p.key for p in program.body[1].declarations[0].init.properties] == ["default", "class"]
        assert program.body[2].expression.property == "default"

    @pytest.mark.parametrize("source", [
        "let try = 1;",
        "const x = class;",
        "function switch() {}",
        "function f(case) {}",
        "const f = throw => 1;",
        "const o = { if };",
    ])
    def test_reserved_words_are_not_names(self, parser, source):
        with pytest.raises(ParseFailure) as exc:
            parser.parse(source, "<test>")
        assert str(exc.value).startswith("Unexpected")


class TestParseFailures:
    """Malformed source"""

    def test_unexpected_token(self, parser):
        with pytest.raises(ParseFailure) as exc:
            parser.parse("let x = ;", "<test>")
        assert str(exc.value).startswith("Unexpected")
        assert exc.value.location.line == 1

    def test_unexpected_end(self, parser):
        with pytest.raises(ParseFailure) as exc:
            parser.parse("function f( {", "<test>")
        assert str(exc.value).startswith("Unexpected")

    def test_unexpected_character(self, parser):
        with pytest.raises(ParseFailure) as exc:
            parser.parse("let x = 1;\nlet y = #;", "<test>")
        assert exc.value.location.line == 2
