"""
Weight Store for the Recurrent Layer

Holds the two shared parameter matrices of a vanilla RNN:
- W: (hidden_units, hidden_units) recurrent weights, h_{t-1} -> h_t
- U: (hidden_units, sequence_length) input weights, x_t -> h_t

There are no biases.

Besides the live weights, the store can keep one snapshot (backup) of both
matrices. A trainer takes a snapshot before an exploratory update and
restores it if the update turns out badly (e.g. keeping the best epoch).
No snapshot is a normal state: bak_W and bak_U are then None.
"""

import numpy as np


class RecurrentWeights:
    """
    The W / U parameter pair plus an optional snapshot.

    The optimizer updates W and U in place, so restore() also copies in place:
    any (param, grad) references handed out earlier stay valid.
    """

    def __init__(self, W, U):
        """
        Args:
            W: Recurrent weights, shape (hidden_units, hidden_units)
            U: Input weights, shape (hidden_units, sequence_length)
        """
        assert W.ndim == 2 and W.shape[0] == W.shape[1], \
            f"W must be square, got shape {W.shape}"
        assert U.ndim == 2 and U.shape[0] == W.shape[0], \
            f"U must have {W.shape[0]} rows, got shape {U.shape}"

        self.W = W
        self.U = U

        # (bak_W, bak_U) or None
        self._backup = None

    @property
    def has_backup(self):
        return self._backup is not None

    @property
    def bak_W(self):
        return None if self._backup is None else self._backup[0]

    @property
    def bak_U(self):
        return None if self._backup is None else self._backup[1]

    def backup(self):
        """Snapshot W and U, replacing any previous snapshot."""
        # Both copies are made before the snapshot is published
        self._backup = (self.W.copy(), self.U.copy())

    def restore(self):
        """Copy the snapshot back into W and U. The snapshot is kept."""
        assert self._backup is not None, "restore() called without a weight backup"

        bak_W, bak_U = self._backup
        np.copyto(self.W, bak_W)
        np.copyto(self.U, bak_U)

    def discard_backup(self):
        self._backup = None

    def parameters(self):
        """Number of trainable values: H*H + H*S."""
        return self.W.size + self.U.size
