import unittest

from tinyyolo_kit.model import (
    CHANNEL_COUNT,
    INPUT_HEIGHT,
    INPUT_WIDTH,
    TENSOR_SIZE,
    TINY_YOLO_V2_ANCHORS,
    TINY_YOLO_V2_VOC,
    VOC_LABELS,
    AnchorTable,
    ClassLabels,
)


class TestShapeConstants(unittest.TestCase):
    def test_grid_shape(self) -> None:
        self.assertEqual(CHANNEL_COUNT, 125)
        self.assertEqual(TENSOR_SIZE, 21125)
        self.assertEqual((INPUT_WIDTH, INPUT_HEIGHT), (416, 416))


class TestClassLabels(unittest.TestCase):
    def test_voc_order(self) -> None:
        self.assertEqual(len(VOC_LABELS), 20)
        self.assertEqual(VOC_LABELS[0], "aeroplane")
        self.assertEqual(VOC_LABELS[14], "person")
        self.assertEqual(VOC_LABELS[19], "tvmonitor")
        self.assertEqual(VOC_LABELS.index_of("dog"), 11)
        self.assertIn("sofa", VOC_LABELS)
        self.assertNotIn("giraffe", VOC_LABELS)

    def test_unknown_label(self) -> None:
        with self.assertRaises(ValueError):
            VOC_LABELS.index_of("giraffe")

    def test_wrong_count_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ClassLabels(("a", "b"))

    def test_duplicates_rejected(self) -> None:
        names = list(VOC_LABELS)
        names[19] = "person"
        with self.assertRaises(ValueError):
            ClassLabels(tuple(names))

    def test_empty_name_rejected(self) -> None:
        names = list(VOC_LABELS)
        names[3] = " "
        with self.assertRaises(ValueError):
            ClassLabels(tuple(names))

    def test_list_input_is_frozen_to_tuple(self) -> None:
        labels = ClassLabels(list(VOC_LABELS))
        self.assertIsInstance(labels.names, tuple)
        self.assertEqual(labels, VOC_LABELS)


class TestAnchorTable(unittest.TestCase):
    def test_default_anchors(self) -> None:
        self.assertEqual(len(TINY_YOLO_V2_ANCHORS), 5)
        self.assertEqual(TINY_YOLO_V2_ANCHORS[0], (1.08, 1.19))
        self.assertEqual(TINY_YOLO_V2_ANCHORS[4], (16.62, 10.52))
        self.assertEqual(TINY_YOLO_V2_ANCHORS.widths[2], 6.63)
        self.assertEqual(TINY_YOLO_V2_ANCHORS.heights[3], 5.11)
        self.assertIs(TINY_YOLO_V2_VOC.anchors, TINY_YOLO_V2_ANCHORS)

    def test_odd_flat_list_rejected(self) -> None:
        with self.assertRaises(ValueError):
            AnchorTable.from_flat((1.0, 2.0, 3.0))

    def test_wrong_count_rejected(self) -> None:
        with self.assertRaises(ValueError):
            AnchorTable(((1.0, 1.0),) * 4)

    def test_non_positive_rejected(self) -> None:
        with self.assertRaises(ValueError):
            AnchorTable(((1.0, 1.0),) * 4 + ((0.0, 1.0),))


if __name__ == "__main__":
    unittest.main()
