"""
Training Context for the Recurrent Layer

A context holds the per-batch scratch buffers a trainer passes into the
layer's backward operations:

    input:   (batch, time_steps, sequence_length)  the batch being trained on
    output:  (batch, time_steps, hidden_units)     hidden states from forward()
    errors:  (batch, time_steps, hidden_units)     dL/dh, last step filled by the trainer
    W_grad:  (hidden_units, hidden_units)          gradient of the loss w.r.t. W
    U_grad:  (hidden_units, sequence_length)       gradient of the loss w.r.t. U

All buffers are allocated once, zero-filled, in the layer's dtype.
"""

import numpy as np


class RecurrentContext:
    """Scratch buffers for one mini-batch of a RecurrentLayer."""

    def __init__(self, layer, batch_size):
        """
        Args:
            layer: RecurrentLayer the buffers are sized for
            batch_size: Number of sequences in the mini-batch
        """
        assert batch_size > 0, f"batch_size must be positive, got {batch_size}"

        T = layer.time_steps
        S = layer.sequence_length
        H = layer.hidden_units
        dtype = layer.dtype

        self.input = np.zeros((batch_size, T, S), dtype=dtype)
        self.output = np.zeros((batch_size, T, H), dtype=dtype)
        self.errors = np.zeros((batch_size, T, H), dtype=dtype)

        self.W_grad = np.zeros((H, H), dtype=dtype)
        self.U_grad = np.zeros((H, S), dtype=dtype)

    @property
    def batch_size(self):
        return self.input.shape[0]

    def load(self, inputs):
        """Copy a batch of input sequences into the context."""
        assert inputs.shape == self.input.shape, \
            f"Expected input of shape {self.input.shape}, got {inputs.shape}"
        np.copyto(self.input, inputs)

    def check(self, layer):
        """Assert that every buffer agrees with the layer and with each other."""
        T = layer.time_steps
        S = layer.sequence_length
        H = layer.hidden_units
        B = self.batch_size

        assert self.input.shape == (B, T, S), \
            f"context.input has shape {self.input.shape}, expected {(B, T, S)}"
        assert self.output.shape == (B, T, H), \
            f"context.output has shape {self.output.shape}, expected {(B, T, H)}"
        assert self.errors.shape == (B, T, H), \
            f"context.errors has shape {self.errors.shape}, expected {(B, T, H)}"
        assert self.W_grad.shape == (H, H), \
            f"context.W_grad has shape {self.W_grad.shape}, expected {(H, H)}"
        assert self.U_grad.shape == (H, S), \
            f"context.U_grad has shape {self.U_grad.shape}, expected {(H, S)}"
