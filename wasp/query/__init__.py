"""SQL query builder.

Queries are trees of pydantic models: expressions (fields, constants, operators,
function calls, sub-queries), clauses (WHERE, ORDER BY, LIMIT, ...) and statements
(:class:`Select`, :class:`Delete`, :class:`Update`, :class:`Insert`, :class:`Upsert`).
A statement's ``render(dialect)`` walks the tree with a fresh :class:`Parameters`
and returns the SQL text with named placeholders plus the mapping of placeholder to bound value.
Build trees directly or through the :class:`Builder` (``Q``).
"""

from ._bases import Clause, Expression, Node, to_expression
from .builder import Builder, Q
from .clauses import GroupByClause, LimitClause, OffsetClause, OrderClause, WhereClause
from .constant import ConstantArray, ConstantExpression
from .delete import Delete
from .field import FieldAlias, FieldExpression, Wildcard
from .function import FunctionExpression
from .insert import Insert
from .operators import (
    COMPARISON_OPERATORS,
    BooleanOperator,
    ComparisonOperator,
    NotOperator,
    UnaryOperator,
)
from .parameters import Parameters
from .select import Select
from .statement import CompiledQuery, Statement
from .table import JoinClause, JoinKind, OnClause, SourceTableClause, TableClause
from .update import Update
from .upsert import Upsert

# Resolve forward references between modules
for _model in (ComparisonOperator, Statement, Select, Delete, Update, Insert, Upsert):
    _model.model_rebuild()

__all__ = [
    "COMPARISON_OPERATORS",
    "BooleanOperator",
    "Builder",
    "Clause",
    "CompiledQuery",
    "ComparisonOperator",
    "ConstantArray",
    "ConstantExpression",
    "Delete",
    "Expression",
    "FieldAlias",
    "FieldExpression",
    "FunctionExpression",
    "GroupByClause",
    "Insert",
    "JoinClause",
    "JoinKind",
    "LimitClause",
    "Node",
    "NotOperator",
    "OffsetClause",
    "OnClause",
    "OrderClause",
    "Parameters",
    "Q",
    "Select",
    "Statement",
    "TableClause",
    "SourceTableClause",
    "UnaryOperator",
    "Update",
    "Upsert",
    "WhereClause",
    "Wildcard",
    "to_expression",
]
