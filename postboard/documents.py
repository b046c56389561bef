"""
Document shapes for users, posts and comments.

Two relationship kinds are kept apart on purpose:

* **Embedded values** (:class:`AuthorSnapshot`, :class:`Comment`) are copied
  into the owning :class:`Post` when written and are owned by it. A post is
  read and searched without resolving anything.
* **References** (:attr:`User.posts`) are post ids. They are resolved by
  lookup and never consulted when searching posts.
"""

import typing
from datetime import datetime, timezone
from typing import List, Optional

from .firestore_model import BaseFirestoreModel
from .pydantic_compat import (
    BaseModel,
    ConfigDict,
    Field,
    PydanticVersion,
    get_field_annotation,
    get_model_fields,
)


class AuthorSnapshot(BaseModel):
    """
    Id and name of a user, copied when a post or comment is written.

    Identity is the ``id``; ``name`` is whatever the user was called at
    copy time and is never refreshed.
    """

    id: str
    name: str

    if PydanticVersion >= 2:
        model_config = ConfigDict(frozen=True)
    else:
        class Config:
            frozen = True

    def __eq__(self, other):
        if isinstance(other, AuthorSnapshot):
            return self.id == other.id
        return NotImplemented

    def __hash__(self):
        return hash(self.id)

    @classmethod
    def of(cls, user: "User") -> "AuthorSnapshot":
        if not user.id:
            raise ValueError("Cannot snapshot a user that has not been saved.")
        return cls(id=user.id, name=user.name)


class Comment(BaseModel):
    text: str
    date: datetime
    author: AuthorSnapshot

    @classmethod
    def by(cls, user: "User", text: str, date: Optional[datetime] = None) -> "Comment":
        return cls(
            text=text,
            date=date or datetime.now(timezone.utc),
            author=AuthorSnapshot.of(user),
        )


class Post(BaseFirestoreModel):
    class Settings:
        name = "posts"
        immutable_fields = frozenset({"author"})

    date: datetime
    title: str
    body: str = ""
    author: AuthorSnapshot
    comments: List[Comment] = Field(default_factory=list)

    @classmethod
    def write(cls, user: "User", title: str, body: str, date: Optional[datetime] = None, **kwargs) -> "Post":
        """Build an unsaved post authored by ``user`` as the user is now."""
        return cls(
            date=date or datetime.now(timezone.utc),
            title=title,
            body=body,
            author=AuthorSnapshot.of(user),
            **kwargs,
        )

    async def add_comment(self, comment: Comment) -> "Post":
        """
        Append ``comment`` to the end of the stored comment list.

        A comment identical to one already stored (same text, date and author
        id and name) is not added a second time.
        """
        return await self.append_to_array("comments", comment)


class User(BaseFirestoreModel):
    class Settings:
        name = "users"
        immutable_fields = frozenset({"posts"})

    name: str
    email: str
    posts: List[str] = Field(default_factory=list)

    async def add_post_reference(self, post: Post) -> "User":
        if not post.id:
            raise ValueError("Cannot reference a post that has not been saved.")
        return await self.append_to_array("posts", post.id)


def _nested_types(annotation) -> typing.Iterator[type]:
    args = typing.get_args(annotation)
    if not args:
        if isinstance(annotation, type):
            yield annotation
        return
    for arg in args:
        yield from _nested_types(arg)


def assert_self_contained(model: type, _seen: Optional[set] = None) -> None:
    """
    Raise ``TypeError`` if ``model`` nests another document model anywhere in
    its fields. Embedded shapes must be plain value models.
    """
    seen = set() if _seen is None else _seen
    seen.add(model)
    for field_name, field_info in get_model_fields(model).items():
        for nested in _nested_types(get_field_annotation(field_info)):
            if issubclass(nested, BaseFirestoreModel):
                raise TypeError(
                    f"{model.__name__}.{field_name} embeds document model "
                    f"{nested.__name__}; store its id instead."
                )
            if issubclass(nested, BaseModel) and nested not in seen:
                assert_self_contained(nested, seen)


assert_self_contained(Post)
assert_self_contained(User)
