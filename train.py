"""
Training Utilities from Scratch

This module implements:
- MSELoss: Loss function for sequence regression on the last hidden state
- SGD: Stochastic Gradient Descent optimizer with momentum
- Gradient clipping: Prevents exploding gradients
- Training loop: Drives a RecurrentLayer through forward, BPTT and updates

The layer itself only knows how to compute gradients into a training
context; deciding what the loss is and how weights move is done here.
"""

import time

import numpy as np


class MSELoss:
    """
    Mean Squared Error Loss.

        L = mean((prediction - target)^2)

    Backward:
        dL/d(prediction) = 2 * (prediction - target) / N

    Where N is the number of elements averaged over.
    """

    def __init__(self):
        # Cache for backward pass
        self.diff = None

    def forward(self, prediction, target):
        """
        Compute the loss.

        Args:
            prediction: Model output, shape (batch, features)
            target: Target values, same shape

        Returns:
            Scalar loss value
        """
        assert prediction.shape == target.shape, \
            f"Prediction shape {prediction.shape} does not match target shape {target.shape}"

        self.diff = prediction - target
        return float(np.mean(self.diff ** 2))

    def backward(self):
        """
        Compute gradient of loss w.r.t. prediction.

        Returns:
            Gradient, same shape as the prediction
        """
        return 2.0 * self.diff / self.diff.size


class SGD:
    """
    Stochastic Gradient Descent with Momentum.

    The basic update rule is:
        param = param - learning_rate * gradient

    With momentum, we maintain a velocity for each parameter:
        velocity = momentum * velocity - learning_rate * gradient
        param = param + velocity
    """

    def __init__(self, learning_rate=0.01, momentum=0.9):
        """
        Initialize optimizer.

        Args:
            learning_rate: Step size for parameter updates
            momentum: Momentum coefficient (0 = no momentum)
        """
        self.lr = learning_rate
        self.momentum = momentum

        # Velocity for each parameter (lazy initialization)
        self.velocities = {}

    def step(self, params_and_grads):
        """
        Update parameters using gradients.

        Args:
            params_and_grads: List of (parameter, gradient) tuples
                              Parameters are numpy arrays (modified in-place)
        """
        for i, (param, grad) in enumerate(params_and_grads):
            if grad is None:
                continue

            if self.momentum > 0:
                if i not in self.velocities:
                    self.velocities[i] = np.zeros_like(param)

                # v = momentum * v - lr * grad
                self.velocities[i] = self.momentum * self.velocities[i] - self.lr * grad

                param += self.velocities[i]

            else:
                param -= self.lr * grad


def clip_gradients(params_and_grads, max_norm=1.0):
    """
    Clip gradients to prevent exploding gradients.

    Recurrent layers are especially prone to exploding gradients: the error
    is multiplied by W^T once per step on its way back through time.

    We use global norm clipping:
    1. Compute the total norm of all gradients
    2. If total norm > max_norm, scale all gradients down proportionally

    Args:
        params_and_grads: List of (parameter, gradient) tuples
        max_norm: Maximum allowed gradient norm

    Returns:
        The total norm before clipping (useful for monitoring)
    """
    total_norm_sq = 0.0
    for param, grad in params_and_grads:
        if grad is not None:
            total_norm_sq += np.sum(grad ** 2)

    total_norm = np.sqrt(total_norm_sq)

    if total_norm > max_norm:
        scale = max_norm / (total_norm + 1e-8)

        for param, grad in params_and_grads:
            if grad is not None:
                grad *= scale

    return total_norm


def train_epoch(layer, data_loader, loss_fn, optimizer, config):
    """
    Train for one epoch.

    Per mini-batch:
        1. forward() fills context.output with the hidden states
        2. the loss on the last hidden state gives dL/dh_{T-1},
           which goes into context.errors[:, T-1]
        3. compute_gradients() runs BPTT into context.W_grad / context.U_grad
        4. gradients are clipped and the optimizer updates W and U

    Args:
        layer: RecurrentLayer
        data_loader: DataLoader yielding (input, target) batches
        loss_fn: MSELoss
        optimizer: SGD optimizer
        config: Configuration dictionary

    Returns:
        (average loss, dict of seconds spent in "forward", "gradients", "optimizer")
    """
    total_loss = 0.0
    num_batches = 0
    timings = {"forward": 0.0, "gradients": 0.0, "optimizer": 0.0}

    for inputs, targets in data_loader:
        context = layer.prepare_context(len(inputs))
        context.load(inputs)

        # =================================================================
        # Forward pass
        # =================================================================
        t0 = time.perf_counter()
        layer.forward(context.input, context.output)
        timings["forward"] += time.perf_counter() - t0

        loss = loss_fn.forward(context.output[:, -1], targets)
        total_loss += loss
        num_batches += 1

        # =================================================================
        # Backward pass
        # =================================================================
        t0 = time.perf_counter()
        context.errors[:, -1] = loss_fn.backward()
        layer.adapt_errors(context)
        layer.compute_gradients(context)
        timings["gradients"] += time.perf_counter() - t0

        # =================================================================
        # Gradient clipping and parameter update
        # =================================================================
        t0 = time.perf_counter()
        params_and_grads = layer.get_params_and_grads(context)
        clip_gradients(params_and_grads, config["max_grad_norm"])
        optimizer.step(params_and_grads)
        timings["optimizer"] += time.perf_counter() - t0

    return total_loss / num_batches, timings


def evaluate(layer, data_loader, loss_fn):
    """
    Evaluate the layer on data.

    Similar to training, but no gradient computation or parameter updates.

    Returns:
        Average loss
    """
    total_loss = 0.0
    num_batches = 0

    for inputs, targets in data_loader:
        outputs = layer.forward(inputs)
        total_loss += loss_fn.forward(outputs[:, -1], targets)
        num_batches += 1

    return total_loss / num_batches


def fit(layer, data_loader, loss_fn, optimizer, config, log_every=None):
    """
    Train for config["epochs"] epochs and keep the best weights.

    Whenever an epoch improves on the best loss so far, the layer's weights
    are snapshotted. At the end the best snapshot is restored, so a late
    divergence does not cost the result of earlier epochs.

    Args:
        log_every: Print progress every this many epochs (None = silent)

    Returns:
        (list of epoch losses, dict of accumulated phase timings)
    """
    losses = []
    best_loss = np.inf
    totals = {"forward": 0.0, "gradients": 0.0, "optimizer": 0.0}

    for epoch in range(config["epochs"]):
        avg_loss, timings = train_epoch(layer, data_loader, loss_fn, optimizer, config)
        losses.append(avg_loss)

        for phase, seconds in timings.items():
            totals[phase] += seconds

        if avg_loss < best_loss:
            best_loss = avg_loss
            layer.backup_weights()

        if log_every and (epoch % log_every == 0 or epoch == config["epochs"] - 1):
            print(f"Epoch {epoch:4d}/{config['epochs']}  |  Loss: {avg_loss:.6f}")

    if layer.weights.has_backup:
        layer.restore_weights()
        layer.weights.discard_backup()

    return losses, totals
