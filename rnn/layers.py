"""
Recurrent Layer from Scratch

This module implements:
- Layer: the interface every trainable layer exposes to a trainer
- RecurrentConfig: the fixed shape/behavior of a recurrent layer
- RecurrentLayer: a vanilla RNN with shared weights across time steps

Each layer implements:
- forward(x): Compute output from input
- compute_gradients(context): Fill the weight gradients of a training context
- backward(context): Compute the gradient w.r.t. the layer input
- get_params_and_grads(context): Return (parameter, gradient) tuples for the optimizer
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .activations import get_activation
from .context import RecurrentContext
from .initializers import get_initializer
from .weights import RecurrentWeights


class Layer:
    """
    Common interface of trainable layers.

    A trainer drives a layer in three phases per mini-batch:
        1. forward()            - fills the context output
        2. adapt_errors()       - lets the layer reshape the incoming errors
        3. compute_gradients()  - fills the weight gradients of the context
    and asks backward() for the error to hand to the previous layer.
    """

    def input_size(self):
        raise NotImplementedError

    def output_size(self):
        raise NotImplementedError

    def parameters(self):
        raise NotImplementedError

    def to_short_string(self):
        raise NotImplementedError

    def forward(self, x, output=None):
        raise NotImplementedError

    def adapt_errors(self, context):
        """Hook called before backpropagation of the errors."""

    def compute_gradients(self, context):
        raise NotImplementedError

    def backward(self, context, output=None):
        raise NotImplementedError

    def prepare_context(self, batch_size):
        raise NotImplementedError

    def get_params_and_grads(self, context):
        raise NotImplementedError


@dataclass(frozen=True)
class RecurrentConfig:
    """
    Fixed configuration of a recurrent layer.

    Attributes:
        time_steps: Number of steps T in every sequence
        sequence_length: Number of input features S per step
        hidden_units: Size H of the hidden state
        activation: Activation name (see activations.ACTIVATIONS) or instance
        dtype: Scalar element type of weights and buffers
        initializer: Initializer name (see initializers.INITIALIZERS) or callable
        truncate: How many steps BPTT walks back (None = the whole sequence)
        lagged_input_grad: Accumulate U_grad against x[t-1] instead of x[t]
    """

    time_steps: int
    sequence_length: int
    hidden_units: int
    activation: Any = "tanh"
    dtype: Any = np.float64
    initializer: Any = "lecun"
    truncate: Optional[int] = None
    lagged_input_grad: bool = False

    def __post_init__(self):
        assert self.time_steps > 0, f"time_steps must be positive, got {self.time_steps}"
        assert self.sequence_length > 0, \
            f"sequence_length must be positive, got {self.sequence_length}"
        assert self.hidden_units > 0, f"hidden_units must be positive, got {self.hidden_units}"
        assert self.truncate is None or self.truncate > 0, \
            f"truncate must be positive, got {self.truncate}"

        # Fail at configuration time rather than on first use
        get_activation(self.activation)
        get_initializer(self.initializer)


class RecurrentLayer(Layer):
    """
    Vanilla Recurrent Neural Network layer (Elman RNN without biases).

    Forward:
        h_0 = f(U @ x_0)
        h_t = f(U @ x_t + W @ h_{t-1})      for t = 1 .. T-1

    Where:
        x_t: input vector at step t, shape (sequence_length,)
        h_t: hidden state at step t, shape (hidden_units,)
        U: input weights, shape (hidden_units, sequence_length)
        W: recurrent weights, shape (hidden_units, hidden_units)
        f: elementwise activation

    The hidden state before step 0 is the zero vector, so the recurrent
    term vanishes at t = 0. The same W and U are shared by every time step
    and every sequence of the batch.

    Backward (truncated backpropagation through time):
        The trainer puts dL/dh_{T-1} into context.errors[:, T-1]. Walking
        time backward from the last step:

            delta_{T-1} = dL/dh_{T-1} * f'(h_{T-1})
            dL/dW      += outer(delta_t, h_{t-1})
            dL/dU      += outer(delta_t, x_t)
            delta_{t-1} = (W^T @ delta_t) * f'(h_{t-1})

        The walk stops after `truncate` steps. With truncate = T this is
        the exact gradient of a loss that depends on the last hidden state.
    """

    def __init__(self, time_steps, sequence_length, hidden_units, activation="tanh",
                 dtype=np.float64, initializer="lecun", truncate=None,
                 lagged_input_grad=False, rng=None):
        """
        Initialize the recurrent layer.

        Args:
            time_steps: Number of steps T in every sequence
            sequence_length: Number of input features S per step
            hidden_units: Size H of the hidden state
            activation: Activation name or instance
            dtype: Scalar element type of weights and buffers
            initializer: Initializer name or callable, invoked once for W and once for U
            truncate: How many steps BPTT walks back (None = the whole sequence)
            lagged_input_grad: Accumulate U_grad against x[t-1] instead of x[t]
            rng: Random source for the initializer (defaults to np.random)
        """
        self.config = RecurrentConfig(
            time_steps=time_steps,
            sequence_length=sequence_length,
            hidden_units=hidden_units,
            activation=activation,
            dtype=dtype,
            initializer=initializer,
            truncate=truncate,
            lagged_input_grad=lagged_input_grad,
        )

        self.activation = get_activation(activation)
        self.dtype = np.dtype(dtype)

        if rng is None:
            rng = np.random

        # Both matrices get the layer's flattened sizes as fan hints
        init = get_initializer(initializer)
        fan_in = self.input_size()
        fan_out = self.output_size()
        W = init((hidden_units, hidden_units), fan_in, fan_out, rng, self.dtype)
        U = init((hidden_units, sequence_length), fan_in, fan_out, rng, self.dtype)

        self.weights = RecurrentWeights(np.asarray(W, dtype=self.dtype),
                                        np.asarray(U, dtype=self.dtype))

    @classmethod
    def from_config(cls, config, rng=None):
        """Build a layer from a CONFIG-style dictionary."""
        return cls(
            time_steps=config["time_steps"],
            sequence_length=config["sequence_length"],
            hidden_units=config["hidden_units"],
            activation=config.get("activation", "tanh"),
            dtype=config.get("dtype", np.float64),
            initializer=config.get("initializer", "lecun"),
            truncate=config.get("truncate"),
            lagged_input_grad=config.get("lagged_input_grad", False),
            rng=rng,
        )

    # =========================================================================
    # Shape and metadata
    # =========================================================================

    @property
    def time_steps(self):
        return self.config.time_steps

    @property
    def sequence_length(self):
        return self.config.sequence_length

    @property
    def hidden_units(self):
        return self.config.hidden_units

    @property
    def truncate(self):
        """Number of steps BPTT walks back."""
        if self.config.truncate is None:
            return self.config.time_steps
        return self.config.truncate

    @property
    def W(self):
        return self.weights.W

    @property
    def U(self):
        return self.weights.U

    def input_size(self):
        return self.time_steps * self.sequence_length

    def output_size(self):
        return self.time_steps * self.hidden_units

    def parameters(self):
        return self.hidden_units * self.hidden_units + self.hidden_units * self.sequence_length

    def to_short_string(self):
        """Short description, e.g. 'RNN: 5x3 -> TANH -> 5x8'."""
        T, S, H = self.time_steps, self.sequence_length, self.hidden_units

        if self.activation.name == "IDENTITY":
            return f"RNN: {T}x{S} -> {T}x{H}"
        return f"RNN: {T}x{S} -> {self.activation.name} -> {T}x{H}"

    def prepare_output(self, samples):
        """Zero-filled output buffer for `samples` sequences."""
        return np.zeros((samples, self.time_steps, self.hidden_units), dtype=self.dtype)

    def prepare_one_output(self):
        return np.zeros((self.time_steps, self.hidden_units), dtype=self.dtype)

    def prepare_context(self, batch_size):
        return RecurrentContext(self, batch_size)

    # =========================================================================
    # Weight snapshots
    # =========================================================================

    def backup_weights(self):
        self.weights.backup()

    def restore_weights(self):
        self.weights.restore()

    # =========================================================================
    # Forward
    # =========================================================================

    def forward(self, x, output=None):
        """
        Run the recurrence over a batch of sequences.

        Args:
            x: Input batch, shape (batch, time_steps, sequence_length)
            output: Optional buffer of shape (batch, time_steps, hidden_units)
                    to write the hidden states into

        Returns:
            Hidden states, shape (batch, time_steps, hidden_units)
        """
        T, S, H = self.time_steps, self.sequence_length, self.hidden_units

        assert x.ndim == 3 and x.shape[1:] == (T, S), \
            f"Expected input of shape (batch, {T}, {S}), got {x.shape}"

        if output is None:
            output = self.prepare_output(x.shape[0])

        assert output.shape[0] == x.shape[0], \
            f"The number of samples must be consistent ({output.shape[0]} != {x.shape[0]})"
        assert output.shape[1:] == (T, H), \
            f"Expected output of shape (batch, {T}, {H}), got {output.shape}"

        W, U = self.weights.W, self.weights.U
        f = self.activation.forward

        # The input term does not depend on the recurrence: project all steps at once
        # (batch, T, S) @ (S, H) -> (batch, T, H)
        projected = x @ U.T

        # t == 0: no previous hidden state
        output[:, 0] = f(projected[:, 0])

        # Each step needs the previous one, so time stays a Python loop;
        # the batch is handled by the matrix products
        for t in range(1, T):
            output[:, t] = f(projected[:, t] + output[:, t - 1] @ W.T)

        return output

    # =========================================================================
    # Backward
    # =========================================================================

    def _bptt_steps(self, context):
        """
        Walk time backward, yielding (t, delta_t) for every step inside the
        truncation window, from t = T-1 down to max(T - truncate, 0).

        delta_t has shape (batch, hidden_units) and is dL/d(pre-activation) at t.
        """
        T = self.time_steps
        last_step = max(T - self.truncate, 0)

        W = self.weights.W
        f_prime = self.activation.derivative
        h = context.output

        t = T - 1
        delta = context.errors[:, t] * f_prime(h[:, t])

        while True:
            yield t, delta

            if t == last_step:
                return

            # Row-vector form of (W^T @ delta) for every sample
            delta = (delta @ W) * f_prime(h[:, t - 1])
            t -= 1

    def adapt_errors(self, context):
        """Nothing to do: the activation derivative is applied during BPTT."""

    def compute_gradients(self, context):
        """
        Compute dL/dW and dL/dU with truncated BPTT.

        Args:
            context: RecurrentContext with input, output and the last step
                     of errors filled in. W_grad and U_grad are overwritten.
        """
        context.check(self)

        W_grad = context.W_grad
        U_grad = context.U_grad
        W_grad.fill(0)
        U_grad.fill(0)

        x = context.input
        h = context.output

        for t, delta in self._bptt_steps(context):
            # Summing outer products over the batch is one matrix product:
            # (H, batch) @ (batch, H) -> (H, H)
            if t > 0:
                W_grad += delta.T @ h[:, t - 1]

            if self.config.lagged_input_grad:
                if t > 0:
                    U_grad += delta.T @ x[:, t - 1]
            else:
                U_grad += delta.T @ x[:, t]

    def backward(self, context, output=None):
        """
        Compute the gradient of the loss w.r.t. the layer input.

        Args:
            context: RecurrentContext with input, output and the last step of errors
            output: Optional buffer of shape (batch, time_steps, sequence_length)

        Returns:
            dL/dx, shape (batch, time_steps, sequence_length). Steps outside
            the truncation window get zeros.
        """
        context.check(self)

        if output is None:
            output = np.zeros_like(context.input)
        else:
            assert output.shape == context.input.shape, \
                f"Expected output of shape {context.input.shape}, got {output.shape}"
            output.fill(0)

        U = self.weights.U

        for t, delta in self._bptt_steps(context):
            # Row-vector form of U^T @ delta: (batch, H) @ (H, S) -> (batch, S)
            output[:, t] = delta @ U

        return output

    # Name used by trainers that hand the error on to the previous layer
    propagate_input_error = backward

    def get_params_and_grads(self, context):
        """Return parameters and their gradients for optimizer."""
        return [(self.weights.W, context.W_grad), (self.weights.U, context.U_grad)]
