# Recurrent layer built from scratch
# Each module implements forward and backward passes with plain NumPy

from .activations import Identity, Sigmoid, Tanh, ReLU, Softplus, get_activation
from .initializers import get_initializer
from .weights import RecurrentWeights
from .context import RecurrentContext
from .layers import Layer, RecurrentConfig, RecurrentLayer
