from bursar_infra.db.ledger.repository import SqlAlchemyAccountRepository, SqlAlchemyTransactionRepository

__all__ = ["SqlAlchemyAccountRepository", "SqlAlchemyTransactionRepository"]
