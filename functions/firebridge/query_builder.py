"""Declarative Firestore query conditions.

Conditions are ``(field, operator, value)`` triples applied left to right
onto a base query. Firestore ANDs every ``where`` clause, so the composed
query is a plain conjunction. A condition whose operator is
``QueryOperator.NONE`` is skipped; callers use it to leave a slot in a
condition list unused.
"""
import enum
from datetime import datetime
from typing import Any, Iterable, NamedTuple, Union

from google.cloud.firestore_v1.base_query import FieldFilter


class QueryOperator(enum.Enum):
    NONE = ""
    EQUAL = "=="
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LESS_OR_EQUAL = "<="
    GREATER_OR_EQUAL = ">="
    ARRAY_CONTAINS = "array_contains"
    NOT_EQUAL = "!="


SCALAR_TYPES = (str, bool, int, float, datetime)


def _check_value(value: Any) -> None:
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, SCALAR_TYPES):
                raise TypeError(
                    f"Unsupported list item in query value: {type(item).__name__}")
    elif not isinstance(value, SCALAR_TYPES):
        raise TypeError(
            f"Unsupported query value type: {type(value).__name__}")


class QueryCondition(NamedTuple):
    field_name: str
    operator: QueryOperator
    value: Any

    @classmethod
    def of(cls, condition: Union["QueryCondition", tuple]) -> "QueryCondition":
        """Coerce a plain triple into a checked condition."""
        field_name, operator, value = condition
        if not isinstance(operator, QueryOperator):
            raise TypeError(
                f"Operator must be a QueryOperator, got {operator!r}")
        if operator is not QueryOperator.NONE:
            _check_value(value)
        return cls(field_name, operator, value)


def to_field_filter(condition: QueryCondition) -> FieldFilter:
    return FieldFilter(condition.field_name, condition.operator.value,
                       condition.value)


def build_query(base_query, conditions: Iterable[Union[QueryCondition, tuple]]):
    """Narrow ``base_query`` by each non-NONE condition, in order.

    Args:
        base_query: A Firestore collection reference or query
        conditions: Ordered condition triples

    Returns:
        The composed query; ``base_query`` itself when every condition is
        NONE
    """
    query = base_query
    for raw in conditions:
        condition = QueryCondition.of(raw)
        if condition.operator is QueryOperator.NONE:
            continue
        query = query.where(filter=to_field_filter(condition))
    return query
