import pytest

from taskcli.adapters.memory.task_repo import InMemoryTaskRepository
from taskcli.services.task_service import TaskService
from fakes import TickingClock


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def repo():
    return InMemoryTaskRepository()


@pytest.fixture
def service(repo, clock):
    return TaskService(repo, clock)
