from bursar_infra.db.fees.repository import SqlAlchemyBillingRepository, SqlAlchemyPaymentRepository

__all__ = ["SqlAlchemyBillingRepository", "SqlAlchemyPaymentRepository"]
