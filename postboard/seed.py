"""
Sample data loaded at startup when ``POSTBOARD_ENABLE_SEEDING`` is set.

Loading wipes the ``users`` and ``posts`` collections and writes the same
documents under the same ids every time, so repeated runs converge.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .config import PostboardSettings
from .documents import Comment, Post, User
from .enums import BatchOperation
from .firestore_client import FirestoreDB
from .services import SearchService, UserService

logger = logging.getLogger(__name__)

# Firestore limit per batch
BATCH_SIZE = 500


def _utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def sample_documents() -> Tuple[List[User], List[Post]]:
    maria = User(id="maria", name="Maria Brown", email="maria@gmail.com")
    alex = User(id="alex", name="Alex Green", email="alex@gmail.com")
    bob = User(id="bob", name="Bob Grey", email="bob@gmail.com")

    trip = Post.write(
        maria,
        title="Off on a trip",
        body="Heading to Lisbon this week. Hugs!",
        date=_utc(2020, 1, 21),
        id="post-trip",
        comments=[
            Comment.by(alex, "Have a great trip!", _utc(2020, 1, 21, 9)),
            Comment.by(bob, "Enjoy it!", _utc(2020, 1, 22, 11)),
        ],
    )
    morning = Post.write(
        maria,
        title="Good morning",
        body="Woke up happy today!",
        date=_utc(2020, 1, 23),
        id="post-morning",
        comments=[
            Comment.by(alex, "Have a nice day, and try running the chores in parallel!", _utc(2020, 1, 23, 8)),
        ],
    )
    book = Post.write(
        alex,
        title="Conquering Java EE",
        body="Notes from the first chapters.",
        date=_utc(2020, 2, 1),
        id="post-book",
    )

    maria.posts = [trip.id, morning.id]
    alex.posts = [book.id]
    return [maria, alex, bob], [trip, morning, book]


async def clear_collection(db: FirestoreDB, collection_name: str) -> int:
    """Delete every document of a top-level collection, in batches."""
    client = db.client
    docs = [doc async for doc in client.collection(collection_name).stream()]
    for i in range(0, len(docs), BATCH_SIZE):
        batch = client.batch()
        for doc in docs[i:i + BATCH_SIZE]:
            batch.delete(doc.reference)
        await batch.commit()
    logger.info(f"Cleared {len(docs)} documents from {collection_name}")
    return len(docs)


async def seed_database(db: FirestoreDB) -> None:
    """Replace the users and posts collections with :func:`sample_documents`."""
    for model in (User, Post):
        await clear_collection(db, model.get_collection_name())

    users, posts = sample_documents()
    operations = [(BatchOperation.CREATE, doc) for doc in [*users, *posts]]
    await User.batch_write(operations)
    logger.info(f"Seeded {len(users)} users and {len(posts)} posts")


async def bootstrap(
    settings: Optional[PostboardSettings] = None,
    db: Optional[FirestoreDB] = None,
) -> Tuple[SearchService, UserService]:
    """
    Connect, register the models and, when enabled, load the sample data.
    """
    from . import init_postboard

    settings = settings or PostboardSettings.from_env()
    db = db or FirestoreDB.from_settings(settings)
    init_postboard(db)

    if settings.enable_seeding:
        await seed_database(db)
    else:
        logger.debug("Seeding disabled")
    return SearchService(), UserService()
