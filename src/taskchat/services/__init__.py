"""Services module for taskchat - query engine and business logic layer."""

from .backend_selector import BackendSelector
from .field_resolver import FieldResolver
from .filter_pipeline import PostQueryFilterPipeline
from .membership import MembershipFilter
from .normalizer import ResultNormalizer
from .sort_service import TaskSortService
from .status_service import StatusService
from .task_query_service import TaskQueryService

__all__ = [
    "BackendSelector",
    "FieldResolver",
    "MembershipFilter",
    "PostQueryFilterPipeline",
    "ResultNormalizer",
    "StatusService",
    "TaskQueryService",
    "TaskSortService",
]
