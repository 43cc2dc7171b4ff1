"""
Transaction helpers shared by the engine apps.

Resolution reads several tables one after another. A concurrent admin edit
between two of those reads must not produce a result that mixes the old and
new configuration, so multi-query reads run inside ``consistent_snapshot()``.
"""
import logging
from contextlib import contextmanager

from django.db import DEFAULT_DB_ALIAS, connections, transaction

logger = logging.getLogger(__name__)


@contextmanager
def consistent_snapshot(using=DEFAULT_DB_ALIAS):
    """
    Run the enclosed reads against a single point-in-time view of the database.

    - PostgreSQL: opens a REPEATABLE READ transaction, so every statement sees
      the snapshot taken by the first one.
    - SQLite: a transaction already serialises readers against writers.

    When called inside an existing atomic block the outer transaction decides
    the isolation level; we only add a savepoint.
    """
    connection = connections[using]
    starts_transaction = not connection.in_atomic_block

    with transaction.atomic(using=using):
        if starts_transaction and connection.vendor == "postgresql":
            with connection.cursor() as cursor:
                cursor.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ")
        elif not starts_transaction:
            logger.debug("consistent_snapshot: reusing enclosing transaction")
        yield connection
