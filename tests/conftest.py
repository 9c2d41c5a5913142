# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bursar_core.interfaces import StaticContributions
from bursar_core.models import REQUIREMENTS_LIST_NAME
from bursar_infra.db.base import Base
import bursar_infra.db.models  # noqa: F401
from bursar_infra.services import build_service_graph


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def contributions():
    return StaticContributions()


@pytest.fixture
def services(session, contributions):
    graph = build_service_graph(session, contributions=contributions, actor="bursar")
    services = graph.as_dict()
    services["contributions"] = contributions
    return services


@pytest.fixture
def store_group(services):
    inv = services["inventory_service"]
    store = inv.add_inventory_list("Main Store")
    return inv.add_inventory_group("Kitchen", store.id)


@pytest.fixture
def requirements_group(services):
    inv = services["inventory_service"]
    requirements = inv.add_inventory_list(REQUIREMENTS_LIST_NAME)
    return inv.add_inventory_group("Dormitory", requirements.id)
