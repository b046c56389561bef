from datetime import datetime, timezone


def utc(year, month, day, hour=0, minute=0, second=0, microsecond=0):
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=timezone.utc)


def post_doc(title, date, body="", comments=(), author=("u1", "Alice")):
    """Raw post document as Firestore stores it."""
    return {
        "title": title,
        "body": body,
        "date": date,
        "author": {"id": author[0], "name": author[1]},
        "comments": [
            {"text": text, "date": date, "author": {"id": "u2", "name": "Bob"}}
            for text in comments
        ],
    }


async def collect(async_gen) -> list:
    """Collect all items from an async generator into a list."""
    return [item async for item in async_gen]
