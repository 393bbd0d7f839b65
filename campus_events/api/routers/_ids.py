"""Path id parsing. Malformed ids are reported as missing records."""

from uuid import UUID

from campus_events.domain.exceptions import NotFound


def parse_id(raw: str, missing: type[NotFound]) -> UUID:
    try:
        return UUID(raw)
    except ValueError:
        raise missing() from None
