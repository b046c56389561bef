"""
Load the sample data into Firestore (or the emulator) and run a few searches.

    FIRESTORE_EMULATOR_HOST=localhost:8080 POSTBOARD_ENABLE_SEEDING=true \
        python examples/search_demo.py
"""
import asyncio
from functools import wraps

from postboard import NotFoundError, PostboardSettings, configure_logging
from postboard.seed import bootstrap


def async_decorator(f):
    """Decorator to allow calling an async function like a sync function"""
    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))
    return wrapper


@async_decorator
async def main():
    settings = PostboardSettings.from_env()
    configure_logging(settings.log_level)
    search, users = await bootstrap(settings)

    for post in await search.title_search("conquering"):
        print("title match:", post.title, "by", post.author.name)

    for post in await search.full_search("parallel", "2020-01-01", "2020-01-30"):
        print("full match:", post.title, post.date.isoformat())

    for post in await users.posts_of("maria"):
        print("maria wrote:", post.title, f"({len(post.comments)} comments)")

    try:
        await search.find_by_id("does-not-exist")
    except NotFoundError as exc:
        print("lookup failed:", exc)


if __name__ == "__main__":
    main()
