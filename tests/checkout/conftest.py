import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield


@pytest.fixture()
def line_items():
    """Two items worth 1000 in total."""
    return [
        {"product_id": "prod-001", "unit_price": 250.0, "quantity": 2},
        {"product_id": "prod-002", "unit_price": 500.0, "quantity": 1},
    ]
