import unittest

import numpy as np

from keycaffe.domain._channel import Channel
from keycaffe.domain._errors import InvalidIndicesError, InvalidSpecificationCountError
from keycaffe.domain._layer import ILayer, Phase
from keycaffe.infrastructure.convolution import ConvolutionLayer, ConvolutionParameter
from keycaffe.infrastructure.encoding import LayerParameterProto
from keycaffe.infrastructure.tensor import Tensor


class TestConvolutionLayerSetup(unittest.TestCase):
    def test_setup_resolves_geometry(self):
        layer = ConvolutionLayer(
            ConvolutionParameter(num_output=16, kernel_size=[3], pad=[1])
        )
        self.assertIsNone(layer.geometry)
        layer.setup([Tensor([2, 3, 32, 32])])
        self.assertEqual(layer.geometry.kernel_shape, (3, 3))
        self.assertEqual(layer.geometry.pad, (1, 1))
        self.assertEqual(layer.geometry.stride, (1, 1))

    def test_setup_uses_first_bottom(self):
        layer = ConvolutionLayer(ConvolutionParameter(kernel_size=[3]))
        layer.setup([Tensor([1, 1, 4, 4, 4]), Tensor([1, 1, 4, 4])])
        self.assertEqual(layer.geometry.num_spatial_axes, 3)

    def test_setup_without_bottom(self):
        with self.assertRaises(InvalidIndicesError):
            ConvolutionLayer(ConvolutionParameter(kernel_size=[3])).setup([])

    def test_failed_setup_keeps_previous_geometry(self):
        layer = ConvolutionLayer(ConvolutionParameter(kernel_size=[3, 5]))
        layer.setup([Tensor([1, 1, 8, 8])])
        before = layer.geometry
        with self.assertRaises(InvalidSpecificationCountError):
            layer.setup([Tensor([1, 1, 8, 8, 8])])
        self.assertIs(layer.geometry, before)

    def test_default_parameter_needs_kernel(self):
        with self.assertRaises(InvalidSpecificationCountError):
            ConvolutionLayer().setup([Tensor([1, 1, 8, 8])])

    def test_satisfies_layer_interface(self):
        layer = ConvolutionLayer()
        self.assertIsInstance(layer, ILayer)
        self.assertEqual(layer.layer_type, "Convolution")
        self.assertEqual(layer.phase, Phase.TRAIN)


class TestConvolutionLayerProto(unittest.TestCase):
    def setUp(self):
        weights = Tensor([2, 1, 3, 3])
        weights.copy_from_numpy(np.arange(18) / 4.0)
        weights.copy_from_numpy(np.ones(18), Channel.DIFF)
        bias = Tensor.full([2], 0.5)
        self.layer = ConvolutionLayer(
            ConvolutionParameter(num_output=2, kernel_size=[3], stride=[2]),
            blobs=[weights, bias],
            phase=Phase.TEST,
            name="conv1",
        )

    def test_to_proto(self):
        msg = self.layer.to_proto()
        self.assertIsInstance(msg, LayerParameterProto)
        self.assertEqual(msg.name, "conv1")
        self.assertEqual(msg.type, "Convolution")
        self.assertEqual(msg.phase, int(Phase.TEST))
        self.assertEqual(list(msg.convolution_param.kernel_size), [3])
        self.assertEqual(len(msg.blobs), 2)
        self.assertEqual(list(msg.blobs[0].shape.dim), [2, 1, 3, 3])
        self.assertEqual(len(msg.blobs[0].double_diff), 0)

    def test_round_trip_through_bytes(self):
        payload = self.layer.to_proto(include_gradient=True).SerializeToString()
        layer = ConvolutionLayer.from_proto(payload)
        self.assertEqual(layer.name, "conv1")
        self.assertEqual(layer.phase, Phase.TEST)
        self.assertEqual(layer.param, self.layer.param)
        self.assertEqual([b.shape for b in layer.blobs], [(2, 1, 3, 3), (2,)])
        np.testing.assert_array_equal(
            layer.blobs[0].to_numpy(), self.layer.blobs[0].to_numpy()
        )
        np.testing.assert_array_equal(
            layer.blobs[0].to_numpy(Channel.DIFF), np.ones((2, 1, 3, 3))
        )
        np.testing.assert_array_equal(layer.blobs[1].to_numpy(), [0.5, 0.5])

    def test_untyped_message_is_accepted(self):
        msg = LayerParameterProto()
        msg.convolution_param.kernel_size.append(5)
        layer = ConvolutionLayer.from_proto(msg)
        self.assertEqual(layer.param.kernel_size, (5,))
        self.assertEqual(layer.blobs, [])

    def test_other_layer_type_rejected(self):
        msg = LayerParameterProto()
        msg.type = "Pooling"
        with self.assertRaises(ValueError):
            ConvolutionLayer.from_proto(msg)


class TestConvolutionLayerConfig(unittest.TestCase):
    def test_config_round_trip(self):
        layer = ConvolutionLayer(
            ConvolutionParameter(kernel_h=3, kernel_w=1, group=2),
            phase=Phase.TEST,
            name="c",
        )
        cfg = layer.get_config()
        self.assertEqual(cfg["phase"], "TEST")
        self.assertEqual(cfg["name"], "c")

        restored = ConvolutionLayer.from_config(cfg)
        self.assertEqual(restored.param, layer.param)
        self.assertEqual(restored.phase, Phase.TEST)
        self.assertEqual(restored.name, "c")

    def test_config_accepts_numeric_phase(self):
        layer = ConvolutionLayer.from_config({"phase": 1})
        self.assertEqual(layer.phase, Phase.TEST)
        self.assertEqual(layer.param, ConvolutionParameter())


if __name__ == "__main__":
    unittest.main()
