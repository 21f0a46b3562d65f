from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session

# Key under Session.info holding the staff id of whoever is mutating stock
ACTOR_KEY = "current_staff_id"


def get_current_staff_id(db: Session) -> Optional[str]:
    return db.info.get(ACTOR_KEY)


@contextmanager
def acting_as(db: Session, staff_id: Optional[str]) -> Iterator[Session]:
    """
    Attribute every medication change flushed inside the block to ``staff_id``.

    The id lives on the session, not on the module, so concurrent requests never
    see each other's actor. It is removed when the block exits, whether the body
    committed or raised, so a pooled or reused session does not carry it into the
    next transaction. A blank ``staff_id`` leaves the session unattributed.
    """
    previous = db.info.get(ACTOR_KEY)
    if staff_id:
        db.info[ACTOR_KEY] = staff_id
    else:
        db.info.pop(ACTOR_KEY, None)
    try:
        yield db
    finally:
        if previous is None:
            db.info.pop(ACTOR_KEY, None)
        else:
            db.info[ACTOR_KEY] = previous
