"""
jsviz AST Transformer
Converts the Lark parse tree to jsviz AST nodes
"""

import logging
from typing import List, Optional, Union

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared import (
    ArrayExpression, ASTNode, BlockStatement, BreakStatement, CallExpression,
    ConditionalExpression, ContinueStatement, DoWhileStatement, EmptyStatement, Expression,
    ExpressionStatement, ForStatement, Identifier, IfStatement, InterpreterImplementationError,
    MemberExpression, NewExpression, ObjectExpression, ParseFailure, Program, Property,
    ReturnStatement, SourceLocation, SpreadElement, Statement, ThisExpression,
    UnsupportedExpression, UnsupportedStatement, VariableDeclaration, VariableDeclarator,
    VariableKind, WhileStatement,
)
from ...shared.values import number_to_string
from ...utils.base import location_from_meta
from ...utils.config import RESERVED_WORDS
from .literals import LiteralParser
from .functions import FunctionDefinitionParser, ParameterParser
from .expressions import OperatorExpressionParser

LarkMeta: TypeAlias = Union[None, object]
ForClause: TypeAlias = Optional[Union[VariableDeclaration, Expression]]

logger: logging.Logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class JsTransformer(Transformer):
    """
    JavaScript AST Transformer

    Every grammar rule that survives inlining has a method here; a rule without
    one is an interpreter bug and is reported as such instead of leaking a raw
    Tree into the AST.
    """

    def __default__(self, data, children, meta):
        raise InterpreterImplementationError(
            f"Missing transformer method for grammar rule '{data}'"
        )

    def __init__(self) -> None:
        super().__init__()
        self.function_parser: FunctionDefinitionParser = FunctionDefinitionParser(self._extract_location)
        self.parameter_parser: ParameterParser = ParameterParser(self._extract_location)
        self.expression_parser: OperatorExpressionParser = OperatorExpressionParser(self._extract_location)
        self.current_file: str = ""  # Must be set by parser before use

    def _extract_location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        """Extract location from Lark meta object; None for empty rules"""
        if not self.current_file:
            raise InterpreterImplementationError(
                "Parser bug: current_file not set before transforming"
            )
        return location_from_meta(meta, self.current_file)

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line,
            column=token.column,
            start=token.start_pos or 0,
            end=token.end_pos or 0,
            end_line=token.end_line or 0,
            end_column=token.end_column or 0,
        )

    def _check_target(self, meta: LarkMeta, target: Expression, what: str) -> None:
        if not isinstance(target, (Identifier, MemberExpression)):
            raise ParseFailure(f"Invalid left-hand side in {what}", self._extract_location(meta))

    def _binding_name(self, token: Token) -> str:
        """Keywords only reach NAME where the keyword itself cannot appear"""
        name = str(token)
        if name in RESERVED_WORDS:
            raise ParseFailure(f"Unexpected reserved word '{name}'", self._token_location(token))
        return name

    # =========================================================================
    # PROGRAM STRUCTURE
    # =========================================================================

    def program(self, meta: LarkMeta, *statements: Statement) -> Program:
        return Program(body=list(statements), location=self._extract_location(meta))

    def block(self, meta: LarkMeta, *statements: Statement) -> BlockStatement:
        return BlockStatement(body=list(statements), location=self._extract_location(meta))

    def empty_stmt(self, meta: LarkMeta) -> EmptyStatement:
        return EmptyStatement(location=self._extract_location(meta))

    def expr_stmt(self, meta: LarkMeta, expression: Expression) -> ExpressionStatement:
        """Grammar: expr_s ';'? - wraps the expression so it can appear in a statement list"""
        return ExpressionStatement(expression=expression, location=self._extract_location(meta))

    # =========================================================================
    # DECLARATIONS
    # =========================================================================

    def var_stmt(self, meta: LarkMeta, declaration: VariableDeclaration) -> VariableDeclaration:
        return declaration

    def var_decl(self, meta: LarkMeta, kind: Token, *declarators: VariableDeclarator) -> VariableDeclaration:
        """Grammar: (VAR | LET | CONST) declarator ("," declarator)*"""
        return VariableDeclaration(
            kind=VariableKind(str(kind)),
            declarations=list(declarators),
            location=self._extract_location(meta),
        )

    def declarator(self, meta: LarkMeta, name: Token, *rest: Union[Token, Expression]) -> VariableDeclarator:
        """Grammar: NAME (EQUAL assign_expr)?"""
        init = rest[-1] if rest else None
        return VariableDeclarator(name=self._binding_name(name), init=init, location=self._extract_location(meta))

    def function_decl(self, meta: LarkMeta, name: Token, *parts):
        self._binding_name(name)
        return self.function_parser.parse_declaration(meta, name, *parts)

    def function_expr(self, meta: LarkMeta, *parts):
        if parts and isinstance(parts[0], Token):
            self._binding_name(parts[0])
        return self.function_parser.parse_expression(meta, *parts)

    def params(self, meta: LarkMeta, *names: Token) -> List[str]:
        for name in names:
            self._binding_name(name)
        return self.parameter_parser.parse_params(names)

    def arrow_params(self, meta: LarkMeta, inner: Optional[Union[Token, Expression]] = None) -> List[str]:
        if isinstance(inner, Token):
            self._binding_name(inner)
        return self.parameter_parser.parse_arrow_params(meta, inner)

    def arrow_function(self, meta: LarkMeta, params: List[str], arrow: Token, body):
        return self.function_parser.parse_arrow(meta, params, arrow, body)

    # =========================================================================
    # CONTROL FLOW
    # =========================================================================

    def if_stmt(self, meta: LarkMeta, test: Expression, consequent: Statement,
                alternate: Optional[Statement] = None) -> IfStatement:
        return IfStatement(test=test, consequent=consequent, alternate=alternate,
                           location=self._extract_location(meta))

    def while_stmt(self, meta: LarkMeta, test: Expression, body: Statement) -> WhileStatement:
        return WhileStatement(test=test, body=body, location=self._extract_location(meta))

    def do_while_stmt(self, meta: LarkMeta, body: Statement, test: Expression) -> DoWhileStatement:
        return DoWhileStatement(body=body, test=test, location=self._extract_location(meta))

    def for_stmt(self, meta: LarkMeta, init: ForClause, test: Optional[Expression],
                 update: Optional[Expression], body: Statement) -> ForStatement:
        return ForStatement(init=init, test=test, update=update, body=body,
                            location=self._extract_location(meta))

    def for_init(self, meta: LarkMeta, *children: ASTNode) -> ForClause:
        return children[0] if children else None

    def for_test(self, meta: LarkMeta, *children: Expression) -> Optional[Expression]:
        return children[0] if children else None

    def for_update(self, meta: LarkMeta, *children: Expression) -> Optional[Expression]:
        return children[0] if children else None

    def return_stmt(self, meta: LarkMeta, keyword: Token, argument: Optional[Expression] = None) -> ReturnStatement:
        return ReturnStatement(argument=argument, location=self._extract_location(meta))

    def break_stmt(self, meta: LarkMeta, keyword: Token) -> BreakStatement:
        return BreakStatement(location=self._extract_location(meta))

    def continue_stmt(self, meta: LarkMeta, keyword: Token) -> ContinueStatement:
        return ContinueStatement(location=self._extract_location(meta))

    # =========================================================================
    # PARSED BUT NOT MODELLED
    # =========================================================================

    def _unsupported(self, meta: LarkMeta, feature: str) -> UnsupportedStatement:
        return UnsupportedStatement(feature=feature, location=self._extract_location(meta))

    def labeled_stmt(self, meta: LarkMeta, label: Token, body: Statement) -> UnsupportedStatement:
        self._binding_name(label)
        return self._unsupported(meta, "labelled statement")

    def try_stmt(self, meta: LarkMeta, *parts) -> UnsupportedStatement:
        return self._unsupported(meta, "try statement")

    def catch_clause(self, meta: LarkMeta, *parts) -> None:
        if parts and isinstance(parts[0], Token):
            self._binding_name(parts[0])
        return None

    def finally_clause(self, meta: LarkMeta, body: BlockStatement) -> None:
        return None

    def throw_stmt(self, meta: LarkMeta, argument: Expression) -> UnsupportedStatement:
        return self._unsupported(meta, "throw statement")

    def switch_stmt(self, meta: LarkMeta, discriminant: Expression, *cases) -> UnsupportedStatement:
        return self._unsupported(meta, "switch statement")

    def switch_case(self, meta: LarkMeta, *parts) -> None:
        return None

    def class_decl(self, meta: LarkMeta, name: Token, *parts) -> UnsupportedStatement:
        self._binding_name(name)
        return self._unsupported(meta, "class declaration")

    def class_member(self, meta: LarkMeta, *parts) -> None:
        return None

    def for_each_stmt(self, meta: LarkMeta, *parts) -> UnsupportedStatement:
        """Grammar: "for" "(" (VAR | LET | CONST)? NAME (IN | OF) expr ")" statement"""
        tokens = [part for part in parts if isinstance(part, Token)]
        keyword = next(tok for tok in tokens if tok.type in ("IN", "OF"))
        self._binding_name(tokens[tokens.index(keyword) - 1])
        return self._unsupported(meta, f"for-{keyword} loop")

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def sequence(self, meta: LarkMeta, left: Expression, right: Expression):
        return self.expression_parser.parse_sequence(meta, left, right)

    def assignment(self, meta: LarkMeta, target: Expression, operator: Token, value: Expression):
        self._check_target(meta, target, "assignment")
        return self.expression_parser.parse_assignment(meta, target, operator, value)

    def ternary(self, meta: LarkMeta, test: Expression, consequent: Expression,
                alternate: Expression) -> ConditionalExpression:
        return ConditionalExpression(test=test, consequent=consequent, alternate=alternate,
                                     location=self._extract_location(meta))

    def logical(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression):
        return self.expression_parser.parse_logical(meta, left, operator, right)

    def binary(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression):
        return self.expression_parser.parse_binary(meta, left, operator, right)

    def unary_op(self, meta: LarkMeta, operator: Token, argument: Expression):
        return self.expression_parser.parse_unary(meta, operator, argument)

    def prefix_update(self, meta: LarkMeta, operator: Token, argument: Expression):
        self._check_target(meta, argument, "prefix operation")
        return self.expression_parser.parse_update(meta, operator, argument, prefix=True)

    def postfix_update(self, meta: LarkMeta, argument: Expression, operator: Token):
        self._check_target(meta, argument, "postfix operation")
        return self.expression_parser.parse_update(meta, operator, argument, prefix=False)

    # =========================================================================
    # MEMBER ACCESS AND CALLS
    # =========================================================================

    def member(self, meta: LarkMeta, obj: Expression, name: Token) -> MemberExpression:
        return MemberExpression(object=obj, property=str(name), computed=False,
                                location=self._extract_location(meta))

    def computed_member(self, meta: LarkMeta, obj: Expression, prop: Expression) -> MemberExpression:
        return MemberExpression(object=obj, property=prop, computed=True,
                                location=self._extract_location(meta))

    def call(self, meta: LarkMeta, callee: Expression, arguments: List[Expression]) -> CallExpression:
        return CallExpression(callee=callee, arguments=arguments, location=self._extract_location(meta))

    def new_expr(self, meta: LarkMeta, callee: Expression, arguments: List[Expression]) -> NewExpression:
        return NewExpression(callee=callee, arguments=arguments, location=self._extract_location(meta))

    def arguments(self, meta: LarkMeta, *args: Expression) -> List[Expression]:
        return list(args)

    def spread(self, meta: LarkMeta, argument: Expression) -> SpreadElement:
        return SpreadElement(argument=argument, location=self._extract_location(meta))

    # =========================================================================
    # PRIMARY EXPRESSIONS
    # =========================================================================

    def number(self, meta: LarkMeta, token: Token):
        return LiteralParser.parse(token, self._extract_location(meta))

    def string(self, meta: LarkMeta, token: Token):
        return LiteralParser.parse(token, self._extract_location(meta))

    def true_lit(self, meta: LarkMeta, token: Token):
        return LiteralParser.parse(token, self._extract_location(meta))

    def false_lit(self, meta: LarkMeta, token: Token):
        return LiteralParser.parse(token, self._extract_location(meta))

    def null_lit(self, meta: LarkMeta, token: Token):
        return LiteralParser.parse(token, self._extract_location(meta))

    def identifier(self, meta: LarkMeta, token: Token) -> Identifier:
        return Identifier(name=self._binding_name(token), location=self._extract_location(meta))

    def this_expr(self, meta: LarkMeta, token: Token) -> ThisExpression:
        return ThisExpression(location=self._extract_location(meta))

    def template_lit(self, meta: LarkMeta, token: Token) -> UnsupportedExpression:
        return UnsupportedExpression(feature="template literal", location=self._extract_location(meta))

    def array_literal(self, meta: LarkMeta, *elements: Expression) -> ArrayExpression:
        return ArrayExpression(elements=list(elements), location=self._extract_location(meta))

    def object_literal(self, meta: LarkMeta, *properties: Property) -> ObjectExpression:
        return ObjectExpression(properties=list(properties), location=self._extract_location(meta))

    def prop_named(self, meta: LarkMeta, name: Token, value: Expression) -> Property:
        return Property(key=str(name), value=value, location=self._extract_location(meta))

    def prop_string(self, meta: LarkMeta, key: Token, value: Expression) -> Property:
        return Property(key=LiteralParser().parse_string(str(key)), value=value,
                        location=self._extract_location(meta))

    def prop_number(self, meta: LarkMeta, key: Token, value: Expression) -> Property:
        numeric = LiteralParser().parse_number(str(key))
        return Property(key=number_to_string(numeric), value=value,
                        location=self._extract_location(meta))

    def prop_computed(self, meta: LarkMeta, key: Expression, value: Expression) -> Property:
        return Property(key=None, value=value, computed=True, location=self._extract_location(meta))

    def prop_shorthand(self, meta: LarkMeta, name: Token) -> Property:
        self._binding_name(name)
        return Property(
            key=str(name),
            value=Identifier(name=str(name), location=self._token_location(name)),
            shorthand=True,
            location=self._extract_location(meta),
        )
