import contextlib
import logging

from database.database import DatabaseManager
from database.repository import Repositories

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def marketplace_uow(db_manager: DatabaseManager):
    """Per-unit-of-work transaction scope.

    Yields the repository bundle bound to a fresh Session. Commits on
    success, rolls back on exception, always closes.

    Usage:
        with marketplace_uow(db_manager) as repos:
            count = repos.matches.expire_pending_before(cutoff)
        # commit happens automatically on successful exit
    """
    with db_manager.session_scope() as session:
        yield Repositories(session)
