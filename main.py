#!/usr/bin/env python3
"""
Recurrent Layer from Scratch - Main Entry Point

This script trains a single recurrent layer on a synthetic sequence task
to demonstrate that the from-scratch forward pass and truncated
backpropagation through time work together.

What this demonstrates:
1. Running a hidden state through time with shared weights
2. Truncated BPTT accumulating gradients across steps and samples
3. Verifying the analytical gradients against finite differences
4. Keeping the best weights with the snapshot/restore protocol

Usage:
    python main.py

Expected output:
- Gradient check relative errors well below 1e-4
- Loss decreasing by more than an order of magnitude
"""

import numpy as np

from config import CONFIG
from rnn import RecurrentLayer
from rnn.gradcheck import check_layer_gradients
from utils.data import create_sequence_task, DataLoader
from train import MSELoss, SGD, fit, evaluate


def print_separator(title=""):
    """Print a visual separator."""
    print("\n" + "=" * 60)
    if title:
        print(f"  {title}")
        print("=" * 60)


def main():
    """Main training and evaluation loop."""

    print_separator("RECURRENT LAYER FROM SCRATCH")

    np.random.seed(42)
    config = CONFIG.copy()

    # =========================================================================
    # Step 1: Build the layer
    # =========================================================================
    print_separator("STEP 1: Building Layer")

    layer = RecurrentLayer.from_config(config)

    print(f"\n  {layer.to_short_string()}")
    print(f"  Input size:  {layer.input_size()}")
    print(f"  Output size: {layer.output_size()}")
    print(f"  Parameters:  {layer.parameters()}")
    print(f"  BPTT truncation: {layer.truncate} steps")

    # =========================================================================
    # Step 2: Gradient check
    # =========================================================================
    print_separator("STEP 2: Gradient Check")

    probe = RecurrentLayer(
        time_steps=3, sequence_length=2, hidden_units=2,
        activation=config["activation"], initializer="xavier",
    )
    errors = check_layer_gradients(probe, np.random.randn(2, 3, 2))
    for name, err in errors.items():
        print(f"  {name:>5}: relative error {err:.2e}")

    # =========================================================================
    # Step 3: Prepare data
    # =========================================================================
    print_separator("STEP 3: Preparing Data")

    inputs, targets = create_sequence_task(
        config["num_samples"], config["time_steps"],
        config["sequence_length"], config["hidden_units"],
    )
    data_loader = DataLoader(inputs, targets, batch_size=config["batch_size"], shuffle=True)

    print(f"\n  Input shape:  {inputs.shape}")
    print(f"  Target shape: {targets.shape}")
    print(f"  Batches per epoch: {len(data_loader)}")

    # =========================================================================
    # Step 4: Training
    # =========================================================================
    print_separator("STEP 4: Training")

    loss_fn = MSELoss()
    optimizer = SGD(learning_rate=config["learning_rate"], momentum=config["momentum"])

    print("\nTraining progress:")
    print("-" * 40)

    losses, timings = fit(layer, data_loader, loss_fn, optimizer, config,
                          log_every=max(config["epochs"] // 10, 1))

    print("-" * 40)
    print(f"\n  Initial loss: {losses[0]:.6f}")
    print(f"  Final loss:   {losses[-1]:.6f}")
    print(f"  Best loss:    {min(losses):.6f}")

    print("\nTime spent per phase:")
    for phase, seconds in timings.items():
        print(f"  {phase:>10}: {seconds:.3f}s")

    # =========================================================================
    # Step 5: Evaluation
    # =========================================================================
    print_separator("STEP 5: Evaluation")

    test_inputs, test_targets = create_sequence_task(
        64, config["time_steps"], config["sequence_length"], config["hidden_units"],
    )
    test_loader = DataLoader(test_inputs, test_targets, batch_size=config["batch_size"], shuffle=False)
    print(f"\n  Held-out loss: {evaluate(layer, test_loader, loss_fn):.6f}")

    sample = test_inputs[:3]
    predictions = layer.forward(sample)[:, -1, 0]
    for i, (pred, target) in enumerate(zip(predictions, test_targets[:3, 0])):
        print(f"  Sequence {i}: predicted {pred:+.4f}  target {target:+.4f}")

    print_separator("COMPLETE")


if __name__ == "__main__":
    main()
