import unittest

from keycaffe.domain._errors import ContractViolationError
from keycaffe.infrastructure.tensor import Tensor


class TestTensorLegacyAxes(unittest.TestCase):
    def test_full_rank_four(self):
        t = Tensor([2, 3, 4, 5])
        self.assertEqual((t.num, t.channels, t.height, t.width), (2, 3, 4, 5))

    def test_missing_axes_read_as_one(self):
        t = Tensor([2, 3])
        self.assertEqual((t.num, t.channels, t.height, t.width), (2, 3, 1, 1))

    def test_negative_index_counts_from_end(self):
        t = Tensor([2, 3, 4])
        self.assertEqual(t.legacy_axis(-1), 4)
        self.assertEqual(t.legacy_axis(-3), 2)
        self.assertEqual(t.legacy_axis(-4), 1)

    def test_index_equal_to_rank_reads_as_one(self):
        t = Tensor([7, 8, 9, 10])
        self.assertEqual(t.legacy_axis(4), 1)
        self.assertEqual(Tensor([5]).legacy_axis(1), 1)

    def test_index_beyond_legacy_range_reads_as_one(self):
        t = Tensor([2, 3])
        self.assertEqual(t.legacy_axis(5), 1)
        self.assertEqual(t.legacy_axis(-5), 1)
        self.assertEqual(Tensor([2, 3, 4, 5]).legacy_axis(100), 1)

    def test_rank_above_four_rejected(self):
        t = Tensor([1, 2, 3, 4, 5])
        with self.assertRaises(ContractViolationError):
            _ = t.num
        with self.assertRaises(ContractViolationError):
            _ = t.width

    def test_contract_violation_is_not_an_input_error(self):
        with self.assertRaises(ContractViolationError) as cm:
            Tensor([1, 1, 1, 1, 1]).legacy_axis(0)
        self.assertNotIsInstance(cm.exception, ValueError)
        self.assertEqual(cm.exception.op, "legacy_axis")


if __name__ == "__main__":
    unittest.main()
