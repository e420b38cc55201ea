"""
Relation Executor

Runs a classified relation and checks the shape of what comes back. This is
what catches a wrong foreign key, pivot table or class reference: those only
fail once the query actually runs.
"""

from ..exceptions import InvalidRelationError
from .classifier import ClassifiedRelation


def execute(classified: ClassifiedRelation) -> list:
    """
    Fetch all rows of a classified relation.

    Returns:
        The fetched rows. Their contents are not checked.

    Raises:
        InvalidRelationError: if fetching raises, or does not return a list.
    """
    try:
        output = classified.relation.get()
    except Exception as e:
        raise InvalidRelationError(f"{classified.label} is invalid: {e}") from e

    if not isinstance(output, list):
        raise InvalidRelationError(
            f"{classified.label}.get() output needs to be a list, was {type(output).__name__}"
        )
    return output
