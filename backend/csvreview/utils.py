"""Common utility functions"""
import json
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type, TypeVar, Union

from sqlalchemy.orm import Session

from csvreview.errors import NotFound

T = TypeVar('T')


def parse_json_safe(data: Optional[Union[str, Dict, List]], default: Optional[Any] = None) -> Any:
    """
    Safely parse JSON string, returning default if parsing fails.

    Args:
        data: JSON string or already parsed data
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON data or default value
    """
    if data is None:
        return default
    try:
        return json.loads(data) if isinstance(data, str) else data
    except (json.JSONDecodeError, TypeError):
        return default


def get_or_404(db: Session, model: Type[T], id: str, detail: str = "Resource not found") -> T:
    """
    Get a model instance by ID or raise NotFound.

    Args:
        db: Database session
        model: SQLAlchemy model class
        id: Primary key ID
        detail: Error message if not found

    Returns:
        Model instance

    Raises:
        NotFound: if resource not found
    """
    instance = db.get(model, id)
    if not instance:
        raise NotFound(detail)
    return instance


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most ``size`` items"""
    for start in range(0, len(items), size):
        yield items[start:start + size]
