from .query_builder import ChangeListener, QueryBuilder
from .schema import BuilderSchema, QueryView

__all__ = ["BuilderSchema", "ChangeListener", "QueryBuilder", "QueryView"]
