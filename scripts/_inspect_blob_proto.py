#!/usr/bin/env python3
"""
Inspect a serialized BlobProto file.

This script decodes a binary BlobProto (as written by `Tensor.serialize()` or
any Caffe implementation) and prints a human-readable summary of:

- the reconstructed shape and capacity
- the L1 / L2 (sum of squares) reductions of both channels
- optionally, the leading values of each channel
"""

from __future__ import annotations

import argparse
from pathlib import Path

from keycaffe.domain._channel import Channel
from keycaffe.infrastructure.tensor import Tensor


def _print_channel(t: Tensor, channel: Channel, *, head: int | None) -> None:
    print(f"\n[{channel.value}]")
    print(f"  l1 : {t.l1_norm(channel)}")
    print(f"  l2 : {t.l2_norm(channel)}")
    if head:
        values = t.to_numpy(channel).reshape(-1)[:head]
        print(f"  head ({len(values)}): {values.tolist()}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect a serialized BlobProto file.")
    parser.add_argument(
        "path",
        type=Path,
        help="Path to the binary BlobProto file",
    )
    parser.add_argument(
        "--head",
        type=int,
        default=0,
        help="Number of leading values to print per channel (0 = hide)",
    )

    args = parser.parse_args()
    path: Path = args.path

    t = Tensor.deserialize(path.read_bytes())

    print("=" * 80)
    print("KeyCaffe BlobProto")
    print("=" * 80)

    print(f"File     : {path}")
    print(f"Shape    : {t.shape}")
    print(f"Capacity : {t.capacity}")

    head = args.head if args.head > 0 else None
    for channel in Channel:
        _print_channel(t, channel, head=head)

    print("\nDone.")


if __name__ == "__main__":
    main()
