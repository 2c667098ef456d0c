"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: services/transactions.py – транзакции «чтение – изменение – запись».

SQLAlchemy не передаёт FOR UPDATE в SQLite, а pysqlite открывает транзакцию
только перед первой записью. Поэтому для SQLite транзакция начинается явно
командой BEGIN IMMEDIATE: блокировка записи берётся до чтения, и параллельные
запросы выполняются по очереди. Ожидание блокировки ограничено параметром
timeout подключения (DB_BUSY_TIMEOUT_SECONDS).
"""

from extensions import db


def begin_write_transaction() -> None:
    """Берёт блокировку записи для текущей транзакции сессии.

    Для остальных СУБД ничего не делает: там работает SELECT ... FOR UPDATE.
    """
    if db.engine.dialect.name != "sqlite":
        return

    connection = db.session.connection()
    if not connection.connection.driver_connection.in_transaction:
        connection.exec_driver_sql("BEGIN IMMEDIATE")
