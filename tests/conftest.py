import numpy as np
import pytest

from rnn import RecurrentLayer


def pytest_runtest_setup(item) -> None:
    # Set a default seed for determinism unless a test overrides it
    np.random.seed(0)


@pytest.fixture
def scalar_layer():
    """T=2, S=1, H=1 identity layer with W=[[0.5]], U=[[2.0]]."""
    layer = RecurrentLayer(time_steps=2, sequence_length=1, hidden_units=1,
                           activation="identity", initializer="zeros")
    layer.weights.W[...] = 0.5
    layer.weights.U[...] = 2.0
    return layer


@pytest.fixture
def small_layer():
    return RecurrentLayer(time_steps=3, sequence_length=2, hidden_units=2,
                          activation="tanh", initializer="xavier")
