"""Project list filtering.

``build_filter`` turns a caller and request parameters into a ``FilterSpec``,
a plain description of what to match. ``to_where_clause`` is the only place
that knows how a ``FilterSpec`` maps onto SQLAlchemy.
"""

from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from app.core.config import SearchPolicyEnum
from app.schemas.project import ProjectFilter
from app.schemas.user import Caller
from app.shared.pagination import PaginationParams
from models.project import Project, ProjectMember

LIKE_ESCAPE = "\\"


class TextSearch(BaseModel):
    """Case-insensitive substring match on name OR description."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text_search"] = "text_search"
    term: str


class Membership(BaseModel):
    """Caller is the project manager OR appears in its team."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["membership"] = "membership"
    user_id: UUID


Clause = Annotated[Union[TextSearch, Membership], Field(discriminator="kind")]


class FilterSpec(BaseModel):
    """Everything a project listing matches on, plus how the page is cut."""

    model_config = ConfigDict(frozen=True)

    is_active: bool = True
    status: str | None = None
    priority: str | None = None
    clauses: tuple[Clause, ...] = ()
    order_by: Literal["-created_at"] = "-created_at"
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=10, ge=1)

    def has_clause(self, kind: str) -> bool:
        return any(clause.kind == kind for clause in self.clauses)


def build_filter(
    caller: Caller,
    filters: ProjectFilter | None = None,
    pagination: PaginationParams | None = None,
    search_policy: SearchPolicyEnum = SearchPolicyEnum.replace,
) -> FilterSpec:
    """Build the listing filter for ``caller``.

    Developers are scoped to projects they manage or belong to. Under the
    ``replace`` policy that scope takes the place of the free-text search, so
    a developer's search term is ignored; ``combine`` applies both.
    """
    filters = filters or ProjectFilter()
    pagination = pagination or PaginationParams()

    clauses: list[Clause] = []
    if filters.search:
        clauses.append(TextSearch(term=filters.search))

    if caller.role == "developer":
        if search_policy == SearchPolicyEnum.replace:
            clauses = [c for c in clauses if c.kind != "text_search"]
        clauses.append(Membership(user_id=caller.id))

    return FilterSpec(
        status=filters.status,
        priority=filters.priority,
        clauses=tuple(clauses),
        offset=pagination.offset,
        limit=pagination.limit,
    )


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _clause_condition(clause: Clause) -> ColumnElement:
    if isinstance(clause, TextSearch):
        pattern = f"%{_escape_like(clause.term)}%"
        return or_(
            Project.name.ilike(pattern, escape=LIKE_ESCAPE),
            Project.description.ilike(pattern, escape=LIKE_ESCAPE),
        )
    if isinstance(clause, Membership):
        return or_(
            Project.manager_id == clause.user_id,
            Project.members.any(ProjectMember.user_id == clause.user_id),
        )
    raise TypeError(f"Unsupported filter clause: {clause!r}")


def to_where_clause(spec: FilterSpec) -> ColumnElement:
    conditions = [Project.is_active.is_(spec.is_active)]
    if spec.status:
        conditions.append(Project.status == spec.status)
    if spec.priority:
        conditions.append(Project.priority == spec.priority)
    conditions.extend(_clause_condition(clause) for clause in spec.clauses)
    return and_(*conditions)
