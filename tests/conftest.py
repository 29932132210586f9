import pytest

from digestflow import Runtime, set_runtime


@pytest.fixture(autouse=True)
def fresh_default_runtime():
    """Each test gets its own default runtime so dirty state never leaks."""
    runtime = Runtime()
    previous = set_runtime(runtime)
    yield runtime
    set_runtime(previous)


@pytest.fixture
def runtime():
    return Runtime()
