import pytest

from schedsim.models import build_batch


@pytest.fixture
def reference_batch():
    # P0(0,5,2) P1(1,3,1) P2(2,8,3) P3(3,6,1)
    return build_batch([(0, 5, 2), (1, 3, 1), (2, 8, 3), (3, 6, 1)])
