"""
Configuration for the from-scratch recurrent layer demo.

These hyperparameters are intentionally small so that training runs on CPU
in a few seconds while still exercising the full forward/BPTT cycle.
"""

CONFIG = {
    # ==========================================================================
    # LAYER ARCHITECTURE
    # ==========================================================================

    # Number of time steps in every sequence (fixed for the layer's lifetime)
    "time_steps": 6,

    # Number of input features at each time step
    "sequence_length": 2,

    # Size of the hidden state vector
    # The hidden state is both the layer output and its memory
    "hidden_units": 4,

    # Elementwise nonlinearity: identity, sigmoid, tanh, relu or softplus
    "activation": "tanh",

    # Scalar element type of weights and buffers
    "dtype": "float64",

    # Weight initializer: normal, uniform, lecun, xavier, he or zeros
    "initializer": "xavier",

    # How many steps backpropagation through time walks back
    # None walks the whole sequence (exact gradient)
    "truncate": None,

    # Accumulate U_grad against the input one step behind the error
    # Off by default: the exact chain rule pairs delta_t with x_t
    "lagged_input_grad": False,

    # ==========================================================================
    # TRAINING HYPERPARAMETERS
    # ==========================================================================

    # Learning rate for gradient descent
    "learning_rate": 0.05,

    # Momentum for SGD optimizer
    "momentum": 0.9,

    # Number of training epochs
    "epochs": 200,

    # Batch size (number of sequences per update)
    "batch_size": 16,

    # Number of synthetic training sequences
    "num_samples": 256,

    # ==========================================================================
    # NUMERICAL STABILITY
    # ==========================================================================

    # Small epsilon to prevent division by zero
    "eps": 1e-8,

    # Maximum gradient norm for clipping
    # Prevents exploding gradients through long recurrences
    "max_grad_norm": 1.0,
}
