import pytest


@pytest.fixture(autouse=True)
def restore_failure_policy():
    from thds.lazyval import failure

    before = failure.ON_FAILURE.global_value
    yield
    failure.ON_FAILURE.global_value = before
