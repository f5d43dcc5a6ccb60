import numpy as np
import pytest

from rnn.activations import ACTIVATIONS, Identity, ReLU, Sigmoid, Tanh, get_activation
from rnn.gradcheck import numerical_gradient


@pytest.mark.parametrize("name", sorted(ACTIVATIONS))
def test_derivative_of_output_matches_numerical(name):
    act = get_activation(name)
    # Stay away from 0 so relu's kink is not straddled
    x = np.random.uniform(0.1, 2.0, size=5) * np.random.choice([-1.0, 1.0], size=5)

    analytical = act.derivative(act.forward(x))

    numerical = np.empty_like(x)
    for i in range(x.size):
        xi = x[i:i + 1].copy()
        numerical[i] = numerical_gradient(lambda: np.sum(act.forward(xi)), xi)[0]

    np.testing.assert_allclose(analytical, numerical, rtol=1e-6, atol=1e-8)


def test_forward_values():
    x = np.array([-2.0, -1.0, 0.0, 1.0, 2.0])

    np.testing.assert_array_equal(ReLU().forward(x), [0, 0, 0, 1, 2])
    np.testing.assert_array_equal(Identity().forward(x), x)
    np.testing.assert_allclose(Tanh().forward(x), np.tanh(x))
    np.testing.assert_allclose(Sigmoid().forward(np.array([0.0])), [0.5])


def test_sigmoid_does_not_overflow():
    y = Sigmoid().forward(np.array([-1000.0, 1000.0]))
    np.testing.assert_array_equal(y, [0.0, 1.0])


def test_relu_derivative_keeps_dtype():
    y = np.array([0.0, 1.5], dtype=np.float32)
    d = ReLU().derivative(y)
    assert d.dtype == np.float32
    np.testing.assert_array_equal(d, [0.0, 1.0])


def test_get_activation_is_case_insensitive():
    assert isinstance(get_activation("TANH"), Tanh)


def test_get_activation_passes_instances_through():
    act = Sigmoid()
    assert get_activation(act) is act


def test_unknown_activation_raises():
    with pytest.raises(ValueError, match="Unknown activation"):
        get_activation("swish")
