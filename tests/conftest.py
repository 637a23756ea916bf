import pytest

from pyseud2eqn import tracing
from pyseud2eqn.ExprEngine import Scope


@pytest.fixture
def scope():
    return Scope()


@pytest.fixture(autouse=True)
def quiet_tracing():
    tracing.debug = False
    yield
    tracing.debug = False
