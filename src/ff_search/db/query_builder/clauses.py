"""
Clause types accumulated by the query builder.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

from ...exceptions import QueryBuildError

PLACEHOLDER = "?"


class LogicGate(str, Enum):
    """Keyword that joins a clause to the ones before it."""

    WHERE = "WHERE"
    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Any) -> "LogicGate":
        try:
            return cls(value)
        except ValueError:
            raise QueryBuildError(f"Invalid logic gate '{value}'") from None


class SearchModifier(str, Enum):
    """MySQL full-text search modes."""

    BOOLEAN = "IN BOOLEAN MODE"
    NATURAL_LANGUAGE = "IN NATURAL LANGUAGE MODE"
    NATURAL_LANGUAGE_WITH_EXPANSION = "IN NATURAL LANGUAGE MODE WITH QUERY EXPANSION"
    WITH_EXPANSION = "WITH QUERY EXPANSION"

    @classmethod
    def parse(cls, value: Any) -> "SearchModifier":
        try:
            return cls(value)
        except ValueError:
            raise QueryBuildError(f"Invalid search modifier '{value}'") from None


@dataclass(frozen=True)
class Clause:
    """One WHERE predicate: ``<gate> <column> <operator> ?``."""

    column: str
    operator: str
    value: Any
    logic_gate: LogicGate
    search_modifier: str = ""
    is_match: bool = False

    def placeholder(self) -> str:
        # Full-text predicates need the value wrapped with its mode: (? IN BOOLEAN MODE)
        if self.is_match:
            if self.search_modifier:
                return f"({PLACEHOLDER} {self.search_modifier})"
            return f"({PLACEHOLDER})"
        return PLACEHOLDER

    def render(self) -> str:
        return f"{self.logic_gate.value} {self.column} {self.operator} {self.placeholder()}"


@dataclass(frozen=True)
class MatchExpression:
    """A full-text predicate and the relevance score it adds to the select list."""

    columns: Tuple[str, ...]
    value: str
    search_modifier: SearchModifier
    include_relevance: bool = True

    @property
    def expression(self) -> str:
        return f"MATCH ({', '.join(self.columns)})"

    @staticmethod
    def relevance_alias(index: int) -> str:
        return f"`relevance{index}`"

    def relevance_select(self, index: int) -> str:
        return (
            f"{self.expression} AGAINST ({PLACEHOLDER} {self.search_modifier.value}) "
            f"as {self.relevance_alias(index)}"
        )

    def term_select(self, index: int) -> str:
        return f"{PLACEHOLDER} as `relevance{index}Term`"
