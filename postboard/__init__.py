from typing import List, Optional, Type

from .firestore_model import BaseFirestoreModel
from .firestore_fields import FirestoreField
from .firestore_client import FirestoreDB
from .enums import BatchOperation, FirestoreOperators
from .documents import AuthorSnapshot, Comment, Post, User
from .exceptions import NotFoundError, PostboardError
from .dates import DayStart, ExclusiveBound, normalize_day_start
from .predicates import Predicate, build_full_search_predicate, build_title_predicate
from .executor import QueryExecutor
from .services import SearchService, UserService
from .config import PostboardSettings, configure_logging


def init_postboard(database: FirestoreDB, document_models: Optional[List[Type[BaseFirestoreModel]]] = None):
    for model in document_models or [User, Post]:
        model.initialize_db(database)
        model.initialize_fields()


__all__ = [
    "BaseFirestoreModel",
    "FirestoreField",
    "FirestoreDB",
    "BatchOperation",
    "FirestoreOperators",
    "AuthorSnapshot",
    "Comment",
    "Post",
    "User",
    "NotFoundError",
    "PostboardError",
    "DayStart",
    "ExclusiveBound",
    "normalize_day_start",
    "Predicate",
    "build_full_search_predicate",
    "build_title_predicate",
    "QueryExecutor",
    "SearchService",
    "UserService",
    "PostboardSettings",
    "configure_logging",
    "init_postboard",
]
