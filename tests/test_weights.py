import numpy as np
import pytest

from rnn import RecurrentLayer, RecurrentWeights


def make_weights():
    return RecurrentWeights(np.arange(4.0).reshape(2, 2), np.arange(6.0).reshape(2, 3))


def test_no_backup_by_default():
    weights = make_weights()
    assert not weights.has_backup
    assert weights.bak_W is None
    assert weights.bak_U is None


def test_backup_and_restore_round_trip():
    weights = make_weights()
    original_W = weights.W.copy()
    original_U = weights.U.copy()

    weights.backup()
    weights.W += 10.0
    weights.U *= -1.0
    weights.restore()

    np.testing.assert_array_equal(weights.W, original_W)
    np.testing.assert_array_equal(weights.U, original_U)
    assert weights.has_backup


def test_backup_is_a_copy():
    weights = make_weights()
    weights.backup()
    weights.W[0, 0] = 99.0
    assert weights.bak_W[0, 0] == 0.0


def test_restore_keeps_array_identity():
    weights = make_weights()
    W = weights.W
    weights.backup()
    W += 1.0
    weights.restore()
    assert weights.W is W


def test_discard_backup():
    weights = make_weights()
    weights.backup()
    weights.discard_backup()
    assert not weights.has_backup


def test_restore_without_backup_fails():
    with pytest.raises(AssertionError):
        make_weights().restore()


def test_shape_mismatch_fails():
    with pytest.raises(AssertionError):
        RecurrentWeights(np.zeros((2, 2)), np.zeros((3, 1)))


def test_parameter_count():
    assert make_weights().parameters() == 2 * 2 + 2 * 3


def test_layer_snapshot_delegates_to_store():
    layer = RecurrentLayer(3, 2, 4)
    layer.backup_weights()
    saved = layer.W.copy()
    layer.W[...] = 0.0
    layer.restore_weights()
    np.testing.assert_array_equal(layer.W, saved)
