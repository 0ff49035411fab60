import os
import unittest

import numpy as np

from keycaffe.domain._channel import Channel
from keycaffe.domain._errors import (
    ExceedMaxAxesError,
    InvalidShapeError,
    LengthMismatchError,
)
from keycaffe.infrastructure.encoding import BlobProto
from keycaffe.infrastructure.tensor import Tensor


class TestTensorToProto(unittest.TestCase):
    def setUp(self):
        self.t = Tensor([2, 3])
        self.t.copy_from_numpy(np.arange(6) * 0.5)
        self.t.copy_from_numpy(np.arange(6) - 3.0, Channel.DIFF)

    def test_emits_shape_and_double_data(self):
        msg = self.t.to_proto()
        self.assertEqual(list(msg.shape.dim), [2, 3])
        self.assertEqual(list(msg.double_data), [0.0, 0.5, 1.0, 1.5, 2.0, 2.5])
        self.assertEqual(len(msg.double_diff), 0)

    def test_never_emits_legacy_or_single_precision_fields(self):
        msg = self.t.to_proto(include_gradient=True)
        self.assertEqual((msg.num, msg.channels, msg.height, msg.width), (0, 0, 0, 0))
        self.assertEqual(len(msg.data), 0)
        self.assertEqual(len(msg.diff), 0)
        self.assertEqual(list(msg.double_diff), [-3.0, -2.0, -1.0, 0.0, 1.0, 2.0])

    def test_round_trip_with_gradient(self):
        out = Tensor.deserialize(self.t.serialize(include_gradient=True))
        self.assertEqual(out.shape, self.t.shape)
        np.testing.assert_array_equal(out.to_numpy(), self.t.to_numpy())
        np.testing.assert_array_equal(out.to_numpy(Channel.DIFF), self.t.to_numpy(Channel.DIFF))

    def test_round_trip_without_gradient_zeroes_diff(self):
        out = Tensor.deserialize(self.t.serialize())
        np.testing.assert_array_equal(out.to_numpy(), self.t.to_numpy())
        np.testing.assert_array_equal(out.to_numpy(Channel.DIFF), np.zeros((2, 3)))

    def test_serialize_is_bytes(self):
        self.assertIsInstance(self.t.serialize(), bytes)


class TestTensorFromProto(unittest.TestCase):
    def test_legacy_tuple_takes_precedence_over_shape(self):
        msg = BlobProto()
        msg.num, msg.channels, msg.height, msg.width = 1, 2, 1, 3
        msg.shape.dim.extend([99])
        msg.double_data.extend(range(6))
        t = Tensor.from_proto(msg)
        self.assertEqual(t.shape, (1, 2, 1, 3))
        self.assertEqual(t.get([0, 1, 0, 2]), 5.0)

    def test_partial_legacy_tuple_is_invalid(self):
        msg = BlobProto()
        msg.num = 2
        msg.shape.dim.extend([2])
        with self.assertRaises(InvalidShapeError):
            Tensor.from_proto(msg)

    def test_single_precision_payload_is_read(self):
        msg = BlobProto()
        msg.shape.dim.extend([3])
        msg.data.extend([1.5, 2.5, -4.0])
        msg.diff.extend([0.25, 0.5, 0.75])
        t = Tensor.from_proto(msg)
        np.testing.assert_array_equal(t.to_numpy(), [1.5, 2.5, -4.0])
        np.testing.assert_array_equal(t.to_numpy(Channel.DIFF), [0.25, 0.5, 0.75])

    def test_single_precision_wins_with_warning(self):
        msg = BlobProto()
        msg.shape.dim.extend([2])
        msg.data.extend([1.0, 2.0])
        msg.double_data.extend([10.0, 20.0])
        with self.assertWarns(RuntimeWarning):
            t = Tensor.from_proto(msg)
        np.testing.assert_array_equal(t.to_numpy(), [1.0, 2.0])

    def test_dual_payload_warning_points_at_caller(self):
        msg = BlobProto()
        msg.shape.dim.extend([1])
        msg.diff.append(1.0)
        msg.double_diff.append(2.0)

        with self.assertWarns(RuntimeWarning) as cm:
            Tensor.from_proto(msg)
        self.assertEqual(os.path.basename(cm.filename), os.path.basename(__file__))

        with self.assertWarns(RuntimeWarning) as cm:
            Tensor.deserialize(msg.SerializeToString())
        self.assertEqual(os.path.basename(cm.filename), os.path.basename(__file__))

    def test_payload_length_mismatch(self):
        msg = BlobProto()
        msg.shape.dim.extend([2, 2])
        msg.double_data.extend([1.0, 2.0, 3.0])
        with self.assertRaises(LengthMismatchError) as cm:
            Tensor.from_proto(msg)
        self.assertEqual(cm.exception.field, "double_data")
        self.assertEqual(cm.exception.expected, 4)
        self.assertEqual(cm.exception.actual, 3)

    def test_diff_length_mismatch(self):
        msg = BlobProto()
        msg.shape.dim.extend([2])
        msg.diff.extend([1.0])
        with self.assertRaises(LengthMismatchError) as cm:
            Tensor.from_proto(msg)
        self.assertEqual(cm.exception.field, "diff")

    def test_missing_payload_leaves_zeros(self):
        msg = BlobProto()
        msg.shape.dim.extend([2, 2])
        t = Tensor.from_proto(msg)
        np.testing.assert_array_equal(t.to_numpy(), np.zeros((2, 2)))

    def test_empty_message_has_no_shape(self):
        with self.assertRaises(InvalidShapeError):
            Tensor.from_proto(BlobProto())
        with self.assertRaises(InvalidShapeError):
            Tensor.deserialize(b"")

    def test_too_many_axes(self):
        msg = BlobProto()
        msg.shape.dim.extend([1] * 33)
        with self.assertRaises(ExceedMaxAxesError):
            Tensor.from_proto(msg)

    def test_zero_dim_rejected(self):
        msg = BlobProto()
        msg.shape.dim.extend([2, 0])
        with self.assertRaises(InvalidShapeError):
            Tensor.from_proto(msg)

    def test_garbage_bytes(self):
        with self.assertRaises(ValueError):
            Tensor.deserialize(b"\xff\xff\xff")

    def test_wrong_payload_type(self):
        with self.assertRaises(TypeError):
            Tensor.from_proto(12)


if __name__ == "__main__":
    unittest.main()
