"""
Activation Functions for the Recurrent Layer

This module implements the elementwise nonlinearities a recurrent layer can
be configured with. Each activation provides:
- forward(x): the nonlinearity applied to a pre-activation array
- derivative(y): the derivative, expressed in terms of the OUTPUT y = f(x)

Why the derivative of the output?
    Backpropagation through time only keeps the hidden states h_t = f(a_t),
    not the pre-activations a_t. For every activation in this set the
    derivative f'(a) can be rewritten as a function of f(a), so the hidden
    states are enough to run the backward pass.

Available activations:
    identity, sigmoid, tanh, relu, softplus
"""

import numpy as np


class Identity:
    """
    Identity activation: y = x, dy/dx = 1.

    A recurrent layer with identity activation is a linear dynamical system.
    """

    name = "IDENTITY"

    def forward(self, x):
        return x

    def derivative(self, y):
        return np.ones_like(y)


class Sigmoid:
    """
    Logistic sigmoid.

    Forward:
        y = 1 / (1 + exp(-x))

    Derivative (in terms of the output):
        dy/dx = y * (1 - y)
    """

    name = "SIGMOID"

    def forward(self, x):
        # Split on the sign of x so exp() never overflows
        out = np.empty_like(x)
        pos = x >= 0
        out[pos] = 1.0 / (1.0 + np.exp(-x[pos]))
        exp_x = np.exp(x[~pos])
        out[~pos] = exp_x / (1.0 + exp_x)
        return out

    def derivative(self, y):
        return y * (1.0 - y)


class Tanh:
    """
    Hyperbolic tangent, the classic choice for vanilla RNNs.

    Forward:
        y = tanh(x)

    Derivative (in terms of the output):
        dy/dx = 1 - y^2
    """

    name = "TANH"

    def forward(self, x):
        return np.tanh(x)

    def derivative(self, y):
        return 1.0 - y * y


class ReLU:
    """
    Rectified Linear Unit (ReLU) activation function.

    Forward:
        y = max(0, x)

    Derivative (in terms of the output):
        dy/dx = 1 if y > 0, else 0

    y > 0 exactly when x > 0, so the output carries the same information as
    the input for the gradient. The gradient at x = 0 is conventionally 0.
    """

    name = "RELU"

    def forward(self, x):
        return np.maximum(0, x)

    def derivative(self, y):
        # (y > 0) is a boolean mask; cast so the product keeps the layer dtype
        return (y > 0).astype(y.dtype)


class Softplus:
    """
    Softplus, a smooth approximation of ReLU.

    Forward:
        y = log(1 + exp(x))

    Derivative:
        dy/dx = sigmoid(x) = 1 - exp(-y)
    """

    name = "SOFTPLUS"

    def forward(self, x):
        # logaddexp(0, x) = log(exp(0) + exp(x)) without overflow
        return np.logaddexp(0, x)

    def derivative(self, y):
        return -np.expm1(-y)


ACTIVATIONS = {
    "identity": Identity,
    "sigmoid": Sigmoid,
    "tanh": Tanh,
    "relu": ReLU,
    "softplus": Softplus,
}


def get_activation(activation):
    """
    Resolve an activation by name.

    Args:
        activation: Name (case-insensitive) or an activation instance

    Returns:
        Activation instance with forward() and derivative()

    Raises:
        ValueError: If the name is not one of ACTIVATIONS
    """
    if not isinstance(activation, str):
        return activation

    key = activation.lower()
    if key not in ACTIVATIONS:
        raise ValueError(
            f"Unknown activation '{activation}', expected one of {sorted(ACTIVATIONS)}"
        )
    return ACTIVATIONS[key]()
