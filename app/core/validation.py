"""Validation error aggregation into nested per-field error trees."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass
import types
from typing import Any
from typing import NoReturn
from typing import Protocol
from typing import Union
from typing import get_args
from typing import get_origin

from fastapi import status
from pydantic import BaseModel
from pydantic import ValidationError

from app.core.problems import ProblemDetails
from app.core.problems import ProblemError
from app.core.problems import TYPE_VALIDATION_ERROR

EXTRA_FIELDS_MESSAGE = "This form should not contain extra fields."

ValidationErrorTree = Union[list[str], dict[str, Any]]


class ValidationNode(Protocol):
    """Anything exposing its own messages and named child nodes of the same shape."""

    @property
    def name(self) -> str: ...

    @property
    def errors(self) -> Sequence[str]: ...

    @property
    def children(self) -> Sequence[ValidationNode]: ...


@dataclass(frozen=True)
class FormNode:
    """Bound-and-validated input node; children keep field declaration order."""

    name: str
    errors: tuple[str, ...] = ()
    children: tuple[FormNode, ...] = ()


@dataclass(frozen=True)
class Violation:
    """One failed constraint at a field path."""

    loc: tuple[str | int, ...]
    message: str
    is_extra: bool = False


def collect_errors(node: ValidationNode) -> ValidationErrorTree:
    """Aggregate a node's messages and its failing children into a sparse tree.

    A node without failing children yields its own messages as a list. Otherwise
    the result is a mapping with the node's own messages under positional keys
    followed by one entry per failing child.
    """
    nested: dict[str, ValidationErrorTree] = {}
    for child in node.children:
        child_errors = collect_errors(child)
        if child_errors:
            nested[child.name] = child_errors

    own = list(node.errors)
    if not nested:
        return own

    tree: dict[str, Any] = {str(index): message for index, message in enumerate(own)}
    tree.update(nested)
    return tree


def violations_from_pydantic(exc: ValidationError) -> list[Violation]:
    """Adapt pydantic errors to violations at their input locations."""
    violations: list[Violation] = []
    for issue in exc.errors():
        location = tuple(issue.get("loc", ()))
        if issue.get("type") == "extra_forbidden":
            violations.append(Violation(loc=location, message=EXTRA_FIELDS_MESSAGE, is_extra=True))
            continue
        violations.append(Violation(loc=location, message=str(issue.get("msg", "Invalid value"))))
    return violations


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    if get_origin(annotation) in (Union, types.UnionType):
        for arg in get_args(annotation):
            nested = _nested_model(arg)
            if nested is not None:
                return nested
    return None


def _own_messages(violations: Iterable[Violation], path: tuple[str | int, ...]) -> tuple[str, ...]:
    messages: list[str] = []
    for violation in violations:
        if violation.is_extra and violation.loc[:-1] == path:
            if EXTRA_FIELDS_MESSAGE not in messages:
                messages.append(EXTRA_FIELDS_MESSAGE)
        elif not violation.is_extra and violation.loc == path:
            messages.append(violation.message)
    return tuple(messages)


def _leaf_messages(violations: Iterable[Violation], path: tuple[str | int, ...]) -> tuple[str, ...]:
    return tuple(
        violation.message
        for violation in violations
        if not violation.is_extra and violation.loc[: len(path)] == path
    )


def build_form_tree(
    model: type[BaseModel],
    violations: Sequence[Violation],
    *,
    name: str = "",
    path: tuple[str | int, ...] = (),
) -> FormNode:
    """Build the node tree for ``model`` with ``violations`` attached to their fields."""
    children: list[FormNode] = []
    for field_name, field_info in model.model_fields.items():
        key = field_info.alias or field_name
        child_path = path + (key,)
        nested = _nested_model(field_info.annotation)
        if nested is not None:
            children.append(build_form_tree(nested, violations, name=key, path=child_path))
        else:
            children.append(FormNode(name=key, errors=_leaf_messages(violations, child_path)))

    return FormNode(name=name, errors=_own_messages(violations, path), children=tuple(children))


def raise_validation_problem(model: type[BaseModel], violations: Sequence[Violation]) -> NoReturn:
    """Raise a 400 ``validation_error`` problem carrying the collected error tree."""
    problem = ProblemDetails(status.HTTP_400_BAD_REQUEST, TYPE_VALIDATION_ERROR)
    problem.set("errors", collect_errors(build_form_tree(model, violations)))
    raise ProblemError(problem)
