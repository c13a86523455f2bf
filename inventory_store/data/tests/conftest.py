import pytest
from inventory_store.config import set_config_for_test

START_NS = 1_700_000_000_000_000_000


class FakeClock:
    """Nanosecond clock that advances by `step` on every read."""
    def __init__(self, start: int = START_NS, step: int = 1_000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture(autouse=True)
def quiet_config(tmp_path):
    set_config_for_test(log_level="WARNING", store_backend="memory", data_dir=str(tmp_path / "data"))
    yield

@pytest.fixture
def clock():
    return FakeClock()
