import logging
from typing import List, Optional, Type

from .dates import FAR_FUTURE, NO_LOWER_BOUND, normalize_day_start
from .documents import Post, User
from .exceptions import NotFoundError
from .executor import QueryExecutor
from .predicates import build_full_search_predicate, build_title_predicate

logger = logging.getLogger(__name__)


class SearchService:
    """
    Post lookups used by the request-handling layer.

    Every operation is a read; none keeps state between calls.
    """

    def __init__(self, executor: Optional[QueryExecutor] = None, model: Type[Post] = Post):
        self.model = model
        self.executor = executor or QueryExecutor(model)

    async def title_search(self, text: Optional[str]) -> List[Post]:
        return await self.executor.run(build_title_predicate(text))

    async def full_search(
        self,
        text: Optional[str],
        min_date: Optional[str] = None,
        max_date: Optional[str] = None,
    ) -> List[Post]:
        """
        Posts containing ``text`` in title, body or a comment, dated from the
        start of ``min_date`` through the end of ``max_date`` (UTC days).

        Dates are ``YYYY-MM-DD``; a missing or malformed date leaves that
        side of the range open.
        """
        min_start = normalize_day_start(min_date, NO_LOWER_BOUND)
        max_start = normalize_day_start(max_date, FAR_FUTURE)
        # the only place the upper bound moves to the following day
        predicate = build_full_search_predicate(text, min_start, max_start.next_day())
        return await self.executor.run(predicate)

    async def find_by_id(self, post_id: str) -> Post:
        post = await self.model.get(post_id)
        if post is None:
            raise NotFoundError(self.model.__name__, post_id)
        return post


class UserService:
    def __init__(self, model: Type[User] = User, post_model: Type[Post] = Post):
        self.model = model
        self.post_model = post_model

    async def find_by_id(self, user_id: str) -> User:
        user = await self.model.get(user_id)
        if user is None:
            raise NotFoundError(self.model.__name__, user_id)
        return user

    async def posts_of(self, user_id: str) -> List[Post]:
        """
        Resolve the user's post references, in reference order.

        References to posts deleted since are skipped.
        """
        user = await self.find_by_id(user_id)
        posts = []
        for post_id in user.posts:
            post = await self.post_model.get(post_id)
            if post is None:
                logger.debug(f"User {user_id} references missing post {post_id}")
                continue
            posts.append(post)
        return posts
