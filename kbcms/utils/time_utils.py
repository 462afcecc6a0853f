from datetime import datetime, timezone


def utc_now() -> datetime:
    """Naive UTC timestamp, the form pymongo returns stored dates in"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
