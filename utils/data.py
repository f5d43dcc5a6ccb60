"""
Data Utilities for Recurrent Layer Training

This module handles:
- Synthetic sequence regression data
- Batching and shuffling (DataLoader)

The task is chosen so that a small RNN can solve it: the target is half the
running mean of the whole sequence, which the layer has to accumulate in its
hidden state step by step.
"""

import numpy as np


# =============================================================================
# TRAINING DATA CREATION
# =============================================================================

def create_sequence_task(num_samples, time_steps, sequence_length, hidden_units, rng=None):
    """
    Create input-target pairs for sequence regression.

    Each input is a sequence of `time_steps` vectors drawn uniformly from
    [-1, 1]. The target, predicted from the last hidden state, is

        target = 0.5 * mean(x over all steps and features)

    repeated across the `hidden_units` outputs.

    Args:
        num_samples: Number of sequences
        time_steps: Number of steps per sequence
        sequence_length: Number of features per step
        hidden_units: Size of the prediction (the layer's hidden state)
        rng: Random source (defaults to np.random)

    Returns:
        inputs: Array of shape (num_samples, time_steps, sequence_length)
        targets: Array of shape (num_samples, hidden_units)
    """
    if rng is None:
        rng = np.random

    inputs = rng.uniform(-1.0, 1.0, size=(num_samples, time_steps, sequence_length))

    means = 0.5 * inputs.mean(axis=(1, 2))
    targets = np.repeat(means[:, None], hidden_units, axis=1)

    return inputs, targets


class DataLoader:
    """
    Simple data loader for iterating over training data.

    This handles:
    - Batching (grouping sequences together)
    - Shuffling (randomizing order each epoch)

    The last batch may be smaller than batch_size.
    """

    def __init__(self, inputs, targets, batch_size=1, shuffle=True):
        """
        Initialize data loader.

        Args:
            inputs: Array of input sequences, shape (num_sequences, time_steps, features)
            targets: Array of targets, shape (num_sequences, ...)
            batch_size: Number of sequences per batch
            shuffle: Whether to shuffle data each epoch
        """
        assert len(inputs) == len(targets), \
            f"Got {len(inputs)} inputs but {len(targets)} targets"

        self.inputs = inputs
        self.targets = targets
        self.batch_size = batch_size
        self.shuffle = shuffle
        self.num_samples = len(inputs)

    def __iter__(self):
        """Iterate over batches."""
        indices = np.arange(self.num_samples)

        if self.shuffle:
            np.random.shuffle(indices)

        for i in range(0, self.num_samples, self.batch_size):
            batch_indices = indices[i:i + self.batch_size]

            yield self.inputs[batch_indices], self.targets[batch_indices]

    def __len__(self):
        """Number of batches per epoch."""
        return (self.num_samples + self.batch_size - 1) // self.batch_size
