"""
Search and reference resolution against the Firestore emulator, including
the date-range filters Firestore itself evaluates.
"""

import pytest

from postboard import Comment, NotFoundError, Post, SearchService, User, UserService
from postboard.seed import seed_database

from ..helpers import utc

pytestmark = pytest.mark.asyncio


async def _ids(coro):
    return sorted(post.id for post in await coro)


async def test_day_inclusive_upper_bound(emulator_models, raw_client):
    author = User(id="u1", name="Alice", email="alice@test.com")
    await author.save()
    for post_id, date in [
        ("midnight", utc(2020, 1, 30)),
        ("late", utc(2020, 1, 30, 23, 59, 59)),
        ("next-day", utc(2020, 1, 31)),
    ]:
        await Post.write(author, "edge", "", date=date, id=post_id).save()

    search = SearchService()
    assert await _ids(search.full_search("edge", "2020-01-01", "2020-01-30")) == ["late", "midnight"]
    assert await _ids(search.full_search("edge", "2020-01-31", "bad-date")) == ["next-day"]


async def test_seeded_comment_search(emulator_models, emulator_db):
    await seed_database(emulator_db)
    search = SearchService()

    assert await _ids(search.full_search("parallel", "2020-01-01", "2020-01-30")) == ["post-morning"]
    assert await _ids(search.title_search("CONQUERING")) == ["post-book"]


async def test_comment_append_is_searchable(emulator_models, raw_client):
    alice = User(id="alice", name="Alice", email="alice@test.com")
    bob = User(id="bob", name="Bob", email="bob@test.com")
    await alice.save()
    await bob.save()
    post = await Post.write(alice, "Quiet post", "nothing here", date=utc(2020, 3, 1), id="quiet").save()
    await alice.add_post_reference(post)

    await post.add_comment(Comment.by(bob, "Try a Parallel stream", utc(2020, 3, 2)))

    stored = (await raw_client.collection("posts").document("quiet").get()).to_dict()
    assert [c["text"] for c in stored["comments"]] == ["Try a Parallel stream"]
    assert await _ids(SearchService().full_search("parallel", "2020-03-01", "2020-03-01")) == ["quiet"]
    assert [p.id for p in await UserService().posts_of("alice")] == ["quiet"]


async def test_not_found(emulator_models):
    with pytest.raises(NotFoundError):
        await SearchService().find_by_id("missing")
    with pytest.raises(NotFoundError):
        await UserService().posts_of("missing")
