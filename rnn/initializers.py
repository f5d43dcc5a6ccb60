"""
Weight Initialization Policies

An initializer fills a weight matrix given a few hints about the layer:

    initializer(shape, fan_in, fan_out, rng, dtype) -> np.ndarray

fan_in / fan_out are the number of values flowing into and out of the layer.
For the recurrent layer these are the flattened sequence sizes
(time_steps * sequence_length and time_steps * hidden_units).

Scaling the weights by the fan keeps the variance of the activations roughly
constant from layer to layer, which keeps gradients from vanishing or
exploding at the start of training.
"""

import numpy as np


def normal(shape, fan_in, fan_out, rng, dtype):
    """Zero-mean, unit-variance normal distribution."""
    return rng.standard_normal(shape).astype(dtype)


def uniform(shape, fan_in, fan_out, rng, dtype):
    """Uniform distribution on [-1, 1)."""
    return rng.uniform(-1.0, 1.0, size=shape).astype(dtype)


def lecun(shape, fan_in, fan_out, rng, dtype):
    """
    LeCun initialization: W ~ Normal(0, sqrt(1 / fan_in))
    """
    scale = np.sqrt(1.0 / fan_in)
    return (rng.standard_normal(shape) * scale).astype(dtype)


def xavier(shape, fan_in, fan_out, rng, dtype):
    """
    Xavier/Glorot initialization: W ~ Normal(0, sqrt(2 / (fan_in + fan_out)))
    """
    scale = np.sqrt(2.0 / (fan_in + fan_out))
    return (rng.standard_normal(shape) * scale).astype(dtype)


def he(shape, fan_in, fan_out, rng, dtype):
    """
    He initialization: W ~ Normal(0, sqrt(2 / fan_in)), suited to ReLU.
    """
    scale = np.sqrt(2.0 / fan_in)
    return (rng.standard_normal(shape) * scale).astype(dtype)


def zeros(shape, fan_in, fan_out, rng, dtype):
    return np.zeros(shape, dtype=dtype)


INITIALIZERS = {
    "normal": normal,
    "uniform": uniform,
    "lecun": lecun,
    "xavier": xavier,
    "he": he,
    "zeros": zeros,
}


def get_initializer(initializer):
    """
    Resolve an initializer by name, or pass a callable through unchanged.

    Raises:
        ValueError: If the name is not one of INITIALIZERS
    """
    if callable(initializer):
        return initializer

    if initializer not in INITIALIZERS:
        raise ValueError(
            f"Unknown initializer '{initializer}', expected one of {sorted(INITIALIZERS)}"
        )
    return INITIALIZERS[initializer]
