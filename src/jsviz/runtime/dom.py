"""
DOM call recognition.

The interpreter never touches a document. It recognizes the handful of
`document.*` shapes the renderer understands and describes them as
DomOperation records attached to the step:

    document.getElementById(id).textContent = v   -> setTextContent
    document.querySelector(sel).innerHTML = v     -> setInnerHTML
    document.querySelector(sel).<prop> = v        -> setProperty
    document.getElementById(id).setAttribute(n, v) -> setAttribute
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..shared.nodes import CallExpression, Expression, Identifier, Literal, MemberExpression

DOCUMENT = "document"

# Lookup method -> how its argument becomes a CSS selector
_SELECTOR_METHODS = {
    "getElementById": "#",
    "querySelector": "",
}


class DomOperationType(Enum):
    SET_TEXT_CONTENT = "setTextContent"
    SET_INNER_HTML = "setInnerHTML"
    SET_PROPERTY = "setProperty"
    SET_ATTRIBUTE = "setAttribute"


_PROPERTY_OPERATIONS = {
    "textContent": DomOperationType.SET_TEXT_CONTENT,
    "innerHTML": DomOperationType.SET_INNER_HTML,
}


@dataclass(frozen=True)
class DomOperation:
    type: DomOperationType
    selector: str
    value: str
    property: Optional[str] = None


@dataclass(frozen=True)
class ElementLookup:
    """`document.<method>(<argument>)` found in the AST."""
    method: str
    argument: Optional[Expression]

    def selector_for(self, text: str) -> str:
        return _SELECTOR_METHODS[self.method] + text


def is_document_access(expr: Expression) -> bool:
    """True for any expression rooted at `document` (document.x, document.f().y ...)."""
    while True:
        if isinstance(expr, Identifier):
            return expr.name == DOCUMENT
        if isinstance(expr, MemberExpression):
            expr = expr.object
        elif isinstance(expr, CallExpression):
            expr = expr.callee
        else:
            return False


def match_element_lookup(expr: Expression) -> Optional[ElementLookup]:
    if not isinstance(expr, CallExpression):
        return None
    callee = expr.callee
    if not (isinstance(callee, MemberExpression) and not callee.computed
            and isinstance(callee.object, Identifier) and callee.object.name == DOCUMENT
            and callee.property in _SELECTOR_METHODS):
        return None
    argument = expr.arguments[0] if expr.arguments else None
    return ElementLookup(method=callee.property, argument=argument)


def property_operation(prop: str) -> DomOperationType:
    return _PROPERTY_OPERATIONS.get(prop, DomOperationType.SET_PROPERTY)


def member_name(expr: MemberExpression) -> Optional[str]:
    """Static property name of a member expression (`a.b` or `a["b"]`)."""
    if not expr.computed:
        return expr.property
    if isinstance(expr.property, Literal) and isinstance(expr.property.value, str):
        return expr.property.value
    return None
