import numpy as np
import pytest

from rnn import RecurrentContext, RecurrentLayer


def test_buffers_are_sized_from_layer():
    layer = RecurrentLayer(time_steps=4, sequence_length=3, hidden_units=5, dtype=np.float32)
    context = layer.prepare_context(7)

    assert context.batch_size == 7
    assert context.input.shape == (7, 4, 3)
    assert context.output.shape == (7, 4, 5)
    assert context.errors.shape == (7, 4, 5)
    assert context.W_grad.shape == (5, 5)
    assert context.U_grad.shape == (5, 3)

    for buf in (context.input, context.output, context.errors, context.W_grad, context.U_grad):
        assert buf.dtype == np.float32
        assert not buf.any()


def test_load_copies_inputs():
    layer = RecurrentLayer(2, 1, 1)
    context = RecurrentContext(layer, 2)
    x = np.ones((2, 2, 1))
    context.load(x)
    x[...] = 0.0
    np.testing.assert_array_equal(context.input, np.ones((2, 2, 1)))


def test_load_rejects_wrong_shape():
    layer = RecurrentLayer(2, 1, 1)
    context = layer.prepare_context(2)
    with pytest.raises(AssertionError):
        context.load(np.ones((3, 2, 1)))


def test_check_detects_mismatched_batch():
    layer = RecurrentLayer(2, 1, 1)
    context = layer.prepare_context(2)
    context.errors = np.zeros((3, 2, 1))
    with pytest.raises(AssertionError, match="errors"):
        context.check(layer)


def test_check_detects_wrong_time_steps():
    context = RecurrentLayer(3, 1, 1).prepare_context(2)
    with pytest.raises(AssertionError):
        context.check(RecurrentLayer(2, 1, 1))


def test_zero_batch_is_rejected():
    with pytest.raises(AssertionError):
        RecurrentLayer(2, 1, 1).prepare_context(0)
