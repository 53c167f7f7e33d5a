from datetime import timezone
from dateutil.parser import parse, ParserError

from blockcms.domain.exceptions import EditConflict, ValidationFailure


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity, *, lock_version=None, if_unmodified_since=None):
    """
    Raises EditConflict when the stored entity moved on since the client
    loaded it.

    Two markers are accepted: the `lock_version` the client read, or an
    If-Unmodified-Since timestamp. Without either no lock is requested.
    """
    if lock_version not in (None, ""):
        try:
            expected = int(lock_version)
        except (TypeError, ValueError):
            raise ValidationFailure({"lock_version": ["is not a number"]})

        if entity.lock_version != expected:
            raise EditConflict(
                f"Conflict detected. {entity!r} is at lock version "
                f"{entity.lock_version}, not {expected}."
            )

    if not if_unmodified_since:
        return

    try:
        client_ts = normalize_ts(parse(if_unmodified_since))
    except (ParserError, OverflowError, ValueError):
        raise ValidationFailure({"If-Unmodified-Since": ["is not a valid timestamp"]})

    # HTTP dates carry whole seconds
    server_ts = normalize_ts(entity.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        raise EditConflict("Conflict detected. Resource has been modified.")
