"""Transaction scope shared by every service operation.

A TransactionContext wraps one Session for exactly one transaction and gives
access to one repository per entity. It is created by ``transaction()`` and
passed explicitly to ledger and resolver calls; nothing reads a global
session.
"""
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from cartengine.exceptions import ConflictRetry, TransactionFailure
from cartengine.repos.cart_line_repo import CartLineRepo
from cartengine.repos.cart_repo import CartRepo
from cartengine.repos.inventory_repo import InventoryRepo
from cartengine.repos.order_repo import OrderRepo
from cartengine.repos.user_repo import UserRepo
from cartengine.utils import settings
from cartengine.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TransactionContext:
    def __init__(self, session: Session):
        self.session = session
        self.users = UserRepo(session)
        self.items = InventoryRepo(session)
        self.carts = CartRepo(session)
        self.cart_lines = CartLineRepo(session)
        self.orders = OrderRepo(session)


@contextmanager
def transaction(session_factory: sessionmaker) -> Iterator[TransactionContext]:
    """Commit on success, roll back everything on any error.

    Driver errors raised before commit become a retryable TransactionFailure;
    constraint violations and errors raised by the commit itself are not
    retryable. Races that are expected to lose on a constraint are turned into
    ConflictRetry by the repositories instead.
    """
    session = session_factory()
    try:
        try:
            yield TransactionContext(session)
        except IntegrityError as e:
            # a constraint violation repeats on every attempt
            session.rollback()
            logger.error(f"Transaction aborted by a constraint: {e}")
            raise TransactionFailure(retryable=False) from e
        except DBAPIError as e:
            session.rollback()
            logger.error(f"Transaction aborted: {e}")
            raise TransactionFailure(retryable=True) from e
        except BaseException:
            session.rollback()
            raise

        try:
            session.commit()
        except DBAPIError as e:
            session.rollback()
            logger.error(f"Commit failed, outcome unknown: {e}")
            raise TransactionFailure(retryable=False) from e
    finally:
        session.close()


def run_in_transaction(
    session_factory: sessionmaker,
    operation: Callable[..., T],
    *args,
    attempts: int | None = None,
) -> T:
    """Run ``operation(tx, *args)`` in a fresh transaction.

    A ConflictRetry restarts the whole transaction from scratch; it never
    reaches the caller.
    """
    attempts = attempts or settings.CONFLICT_RETRY_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            with transaction(session_factory) as tx:
                return operation(tx, *args)
        except ConflictRetry as e:
            logger.info(f"{operation.__name__}: {e.reason} (attempt {attempt}/{attempts})")

    logger.error(f"{operation.__name__}: conflict retries exhausted")
    raise TransactionFailure(retryable=True)
