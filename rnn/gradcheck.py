"""
Gradient Verification Utilities

Numerical gradients are used to verify the analytical BPTT gradients.
The numerical gradient is an approximation:
    df/dx ~ (f(x + eps) - f(x - eps)) / (2 * eps)

Central difference is more accurate than forward difference because
it cancels out the second-order error term.
"""

import numpy as np


def numerical_gradient(func, x, eps=1e-5):
    """
    Compute numerical gradient using central difference.

    Args:
        func: Function of no arguments returning a scalar; it must read x
              (x is perturbed in place)
        x: Array at which to compute the gradient
        eps: Small perturbation size

    Returns:
        Numerical gradient, same shape as x
    """
    grad = np.zeros_like(x)

    # Iterate over each element of x
    it = np.nditer(x, flags=['multi_index'], op_flags=['readwrite'])
    while not it.finished:
        idx = it.multi_index

        original = x[idx]

        x[idx] = original + eps
        f_plus = func()

        x[idx] = original - eps
        f_minus = func()

        grad[idx] = (f_plus - f_minus) / (2 * eps)

        # Restore original value
        x[idx] = original

        it.iternext()

    return grad


def relative_error(analytical, numerical, eps=1e-8):
    """Largest absolute difference, relative to the largest numerical entry."""
    max_diff = np.max(np.abs(analytical - numerical))
    return max_diff / (np.max(np.abs(numerical)) + eps)


def last_step_loss(layer, x):
    """Sum of squared hidden states at the last time step."""
    h = layer.forward(x)
    return np.sum(h[:, -1] ** 2)


def check_layer_gradients(layer, x, eps=1e-5):
    """
    Compare the analytical gradients of a recurrent layer with numerical ones.

    The loss is L = sum(h[:, T-1]^2), so dL/dh_{T-1} = 2 * h[:, T-1].

    Args:
        layer: RecurrentLayer (use float64 weights for meaningful results)
        x: Input batch, shape (batch, time_steps, sequence_length)
        eps: Perturbation size for numerical gradient

    Returns:
        Dict of relative errors for "W", "U" and "input"
    """
    x = np.array(x, dtype=layer.dtype)

    context = layer.prepare_context(x.shape[0])
    context.load(x)
    layer.forward(context.input, context.output)
    context.errors[:, -1] = 2.0 * context.output[:, -1]

    layer.compute_gradients(context)
    grad_input = layer.backward(context)

    def loss():
        return last_step_loss(layer, x)

    num_W = numerical_gradient(loss, layer.weights.W, eps)
    num_U = numerical_gradient(loss, layer.weights.U, eps)
    num_x = numerical_gradient(loss, x, eps)

    return {
        "W": relative_error(context.W_grad, num_W),
        "U": relative_error(context.U_grad, num_U),
        "input": relative_error(grad_input, num_x),
    }
