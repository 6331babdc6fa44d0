import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def promotions_bed():
    from promotions.domain import promotions

    bed = DomainFixture(promotions)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(promotions_bed):
    with promotions_bed.domain_context():
        yield

        # Clear repositories so promotion codes stay unique per test
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()
