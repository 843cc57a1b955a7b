"""Base node types for SQL expression trees."""

from __future__ import annotations
from typing import Any, TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from .parameters import Parameters


class Node(BaseModel):
    """Anything that renders to a SQL fragment: expressions, clauses and statements.

    Rendering is done in two passes over the tree. ``register_tables`` tells the
    :class:`Parameters` which tables are referenced, then ``to_sql`` produces the
    text, registering a bind value in the parameters for every literal it meets.
    """

    model_config = {"arbitrary_types_allowed": True}

    def register_tables(self, parameters: Parameters) -> None:
        """Register the tables this node refers to. Leaves register nothing."""

    def to_sql(self, parameters: Parameters, enclose: bool = False) -> str:
        """SQL fragment for this node; ``enclose`` asks for parentheses around composites."""
        raise NotImplementedError("Subclasses must implement `to_sql`")


class Expression(Node):
    """Base type for all SQL expression nodes.

    Comparison and logic operators are overloaded to build larger expressions,
    e.g. ``(Q.field("age") >= 18) & Q.field("name").like("J%")``.
    """

    def __eq__(self, other: Any):
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="=", left=self, right=other)

    def __ne__(self, other: Any):
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="!=", left=self, right=other)

    def __lt__(self, other: Any):
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="<", left=self, right=other)

    def __le__(self, other: Any):
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="<=", left=self, right=other)

    def __gt__(self, other: Any):
        from .operators import ComparisonOperator
        return ComparisonOperator(operator=">", left=self, right=other)

    def __ge__(self, other: Any):
        from .operators import ComparisonOperator
        return ComparisonOperator(operator=">=", left=self, right=other)

    def __and__(self, other: Any):
        from .operators import BooleanOperator
        return BooleanOperator(operator="AND", operands=[self, other])

    def __or__(self, other: Any):
        from .operators import BooleanOperator
        return BooleanOperator(operator="OR", operands=[self, other])

    def __invert__(self):
        from .operators import NotOperator
        return NotOperator(operand=self)

    def in_(self, other: Any):
        """Build an IN expression (e.g. ``Q.field("id").in_([1, 2, 3])``)."""
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="IN", left=self, right=other)

    def not_in(self, other: Any):
        """Build a NOT IN expression."""
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="NOT IN", left=self, right=other)

    def like(self, pattern: Any):
        """Build a LIKE expression; the pattern is bound as given."""
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="LIKE", left=self, right=pattern)

    def not_like(self, pattern: Any):
        """Build a NOT LIKE expression."""
        from .operators import ComparisonOperator
        return ComparisonOperator(operator="NOT LIKE", left=self, right=pattern)

    def is_null(self):
        """Build an IS NULL expression."""
        from .operators import UnaryOperator
        return UnaryOperator(operator="IS NULL", operand=self)

    def is_not_null(self):
        """Build an IS NOT NULL expression."""
        from .operators import UnaryOperator
        return UnaryOperator(operator="IS NOT NULL", operand=self)


class Clause(Node):
    """A named slot within a statement (WHERE, ORDER BY, LIMIT, JOIN, ...)."""


def to_expression(value: Any, strings_are_fields: bool = False) -> Expression:
    """Coerce a builder argument into an expression.

    Expressions pass through. Strings name a field when ``strings_are_fields`` is
    set; lists, tuples and sets become a :class:`ConstantArray`; any other value
    becomes a :class:`ConstantExpression`.
    """
    from .constant import ConstantArray, ConstantExpression
    from .field import FieldExpression

    if isinstance(value, Expression):
        return value
    if isinstance(value, Node):
        raise ValueError(f"{type(value).__name__} cannot be used as an expression")
    if strings_are_fields and isinstance(value, str):
        return FieldExpression(field=value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return ConstantArray(values=list(value))
    return ConstantExpression(value=value)
