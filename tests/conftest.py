import pytest
from http_fakes import BARAO_GERALDO, CENTRO, SAO_PAULO, FakeServices


@pytest.fixture
def services() -> FakeServices:
    return FakeServices(places={"Centro": CENTRO, "Barao Geraldo": BARAO_GERALDO, "Se": SAO_PAULO})
