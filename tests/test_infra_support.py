from __future__ import annotations

import logging
from datetime import datetime, timezone

from bursar_core.models import InventoryAction, InventoryItem, LogSource
from bursar_core.services.balances import resolve_requirement_availability
from bursar_infra import path
from bursar_infra.db.inventory.mapper import log_from_orm
from bursar_infra.db.models import InventoryLogORM
from bursar_infra.logging_config import setup_logging
from bursar_infra.operational_support import (
    TraceIdLogFilter,
    bind_trace_id,
    current_trace_id,
    redact_text,
    redact_value,
)
from bursar_infra.services import ServiceGraph, build_service_graph


def test_trace_id_is_bound_for_the_block_only():
    assert current_trace_id() is None
    with bind_trace_id("op-test") as trace_id:
        assert trace_id == "op-test"
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        TraceIdLogFilter().filter(record)
        assert record.trace_id == "op-test"
    assert current_trace_id() is None


def test_generated_trace_ids_have_prefix():
    with bind_trace_id() as trace_id:
        assert trace_id.startswith("op-")


def test_redaction_masks_secrets_and_emails():
    assert redact_text("token=abc123 sent to head@school.org") == (
        "token=<redacted> sent to <redacted-email>"
    )
    assert redact_value({"password": "x", "amounts": [1, 2.5], "nested": {"secret_key": "y"}}) == {
        "password": "<redacted>",
        "amounts": [1, 2.5],
        "nested": {"secret_key": "<redacted>"},
    }


def test_data_dir_and_db_url_follow_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(path.DATA_DIR_ENV, str(tmp_path / "data"))
    monkeypatch.delenv(path.DB_URL_ENV, raising=False)

    assert path.user_data_dir() == tmp_path / "data"
    assert path.database_url() == f"sqlite:///{(tmp_path / 'data' / 'bursar.db').as_posix()}"

    monkeypatch.setenv(path.DB_URL_ENV, "sqlite:///:memory:")
    assert path.database_url() == "sqlite:///:memory:"


def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv(path.LOG_LEVEL_ENV, "debug")
    assert path.log_level_name() == "DEBUG"
    monkeypatch.delenv(path.LOG_LEVEL_ENV)
    assert path.log_level_name() == "INFO"


def test_setup_logging_writes_trace_tagged_file(tmp_path):
    root = logging.getLogger()
    previous = list(root.handlers)
    try:
        log_file = setup_logging(tmp_path, console=False)
        with bind_trace_id("op-file"):
            logging.getLogger("bursar.test").warning("stock low")
        for handler in root.handlers:
            handler.flush()

        assert log_file == tmp_path / "bursar.log"
        assert "trace=op-file bursar.test - stock low" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in previous:
            root.addHandler(handler)


def test_service_graph_exposes_every_service(session):
    graph = build_service_graph(session, actor="clerk")

    assert isinstance(graph, ServiceGraph)
    assert set(graph.as_dict()) == {
        "session",
        "audit_service",
        "account_service",
        "ledger_service",
        "inventory_service",
        "transfer_service",
        "requisition_service",
        "budget_service",
        "fee_service",
    }
    assert graph.audit_service.actor == "clerk"


def test_untagged_log_rows_are_classified_on_read():
    def _row(action, comment):
        return InventoryLogORM(
            id="log-1",
            item_id="item-1",
            item_name="Mattress",
            action=action,
            source=None,
            quantity_change=2,
            new_quantity=2,
            comment=comment,
            date=datetime(2025, 1, 1, tzinfo=timezone.utc),
            user="",
        )

    assert log_from_orm(_row(InventoryAction.ADD, "Transfer IN from Dorm A")).source == LogSource.TRANSFER_IN
    assert log_from_orm(_row(InventoryAction.REDUCE, "transfer out to annex")).source == LogSource.TRANSFER_OUT
    assert log_from_orm(_row(InventoryAction.REDUCE, "Kitchen use")).source == LogSource.DIRECT


def test_untagged_transfer_action_without_phrase_reads_as_direct():
    item = InventoryItem.create("Mattress", "g-1")
    row = InventoryLogORM(
        id="log-2",
        item_id=item.id,
        item_name=item.name,
        action=InventoryAction.TRANSFER_IN,
        source=None,
        quantity_change=4,
        new_quantity=4,
        comment="Received from Dorm B",
        date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        user="",
    )
    log = log_from_orm(row)

    assert log.source == LogSource.DIRECT
    result = resolve_requirement_availability(item, [log], brought=10)
    assert result.transfer_ins == 0
    assert result.used == 0
    assert result.available == 10


def test_migrations_build_the_same_tables_as_the_models(tmp_path):
    from sqlalchemy import create_engine, inspect

    from bursar_infra.db.base import Base
    from bursar_infra.migrate import run_migrations

    db_url = f"sqlite:///{(tmp_path / 'migrated.db').as_posix()}"
    run_migrations(db_url)

    engine = create_engine(db_url, future=True)
    try:
        tables = set(inspect(engine).get_table_names()) - {"alembic_version"}
    finally:
        engine.dispose()

    assert tables == set(Base.metadata.tables)
