"""
Domain models for SQL query execution.
Parameter bags, query options and row shape.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PositiveInt, field_validator


# Column name -> decoded value, in select-list order
Row = Dict[str, Any]


@dataclass(frozen=True)
class Positional:
    """Values for a query already written with $1, $2 ... markers. Used verbatim."""
    values: Sequence[Any] = ()

    def as_list(self) -> List[Any]:
        return list(self.values)


@dataclass(frozen=True)
class Named:
    """
    Values for a query written with named placeholders.

    :name binds a value, :!name substitutes a quoted identifier.
    """
    values: Mapping[str, Any] = field(default_factory=dict)


Params = Union[Positional, Named, None]


class QueryOptions(BaseModel):
    """Trailing clause options. Free text is passed through unchecked."""
    model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

    limit: Optional[PositiveInt] = None
    order_by: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('order_by', 'orderBy'),
        description="ORDER BY clause body (free text)",
    )
    group_by: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('group_by', 'groupBy'),
        description="GROUP BY clause body (free text)",
    )
    fields: Optional[List[str]] = None
    logger: Optional[Any] = Field(None, description="Call-level logger")

    @field_validator('fields')
    @classmethod
    def validate_fields(cls, v):
        if v is not None and not v:
            raise ValueError("fields cannot be an empty list")
        return v
