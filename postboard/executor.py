import logging
from typing import List, Type

from google.api_core.exceptions import GoogleAPICallError

from .documents import Post
from .predicates import Predicate

logger = logging.getLogger(__name__)


class QueryExecutor:
    """
    Runs a :class:`Predicate` against a post collection.

    Read-only, no retries. Store failures are logged and re-raised as-is;
    a stored post that no longer fits the model is returned unvalidated.
    """

    def __init__(self, model: Type[Post] = Post):
        self.model = model

    async def run(self, predicate: Predicate) -> List[Post]:
        logger.debug(f"Query: {self.model.get_collection_name()} - {predicate!r}")
        try:
            return [
                doc
                async for doc in self.model.find(
                    filters=list(predicate.filters),
                    match=predicate.accepts,
                    lenient=True,
                )
            ]
        except GoogleAPICallError as exc:
            logger.error(f"Query on {self.model.get_collection_name()} failed: {exc}")
            raise
