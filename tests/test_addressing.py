import logging
import unittest

import torch

from r2cfft.addressing import BatchLayout
from r2cfft.errors import LaunchConfigError, LayoutError
from r2cfft.grid import MAX_GRID_DIM, LaunchConfig


class TestBatchLayout(unittest.TestCase):
    def setUp(self):
        self.layout = BatchLayout(
            batch=3,
            high_dimension=4,
            input_stride=5,
            output_stride=6,
            input_distance=20,
            output_distance=24,
        )

    def test_offsets(self):
        self.assertEqual(self.layout.input_offset(0, 0), 0)
        self.assertEqual(self.layout.input_offset(2, 3), 2 * 20 + 3 * 5)
        self.assertEqual(self.layout.output_offset(2, 3), 2 * 24 + 3 * 6)
        self.assertEqual(self.layout.output_offset(1), 24)

    def test_offset_grid_matches_scalar_offsets(self):
        in_base, out_base = self.layout.offset_grid()

        self.assertEqual(tuple(in_base.shape), (3, 4, 1))
        self.assertEqual(tuple(out_base.shape), (3, 4, 1))
        for b in range(3):
            for r in range(4):
                self.assertEqual(in_base[b, r, 0].item(), self.layout.input_offset(b, r))
                self.assertEqual(out_base[b, r, 0].item(), self.layout.output_offset(b, r))

    def test_one_dimensional_rows_vanish(self):
        layout = BatchLayout.contiguous(14, batch=3)
        in_base, out_base = layout.offset_grid()

        self.assertEqual(in_base.view(-1).tolist(), [0, 7, 14])
        self.assertEqual(out_base.view(-1).tolist(), [0, 8, 16])

    def test_contiguous_layouts(self):
        out_of_place = BatchLayout.contiguous(14, batch=3, high_dimension=2)
        self.assertEqual(out_of_place.input_stride, 7)
        self.assertEqual(out_of_place.input_distance, 14)
        self.assertEqual(out_of_place.output_stride, 8)
        self.assertEqual(out_of_place.output_distance, 16)

        in_place = BatchLayout.contiguous(14, batch=3, high_dimension=2, in_place=True)
        self.assertEqual(in_place.input_stride, in_place.output_stride)
        self.assertEqual(in_place.input_distance, in_place.output_distance)
        self.assertEqual(in_place.input_distance, 16)

    def test_required_lengths(self):
        layout = BatchLayout.contiguous(14, batch=3)

        self.assertEqual(layout.required_input_length(14), 21)
        self.assertEqual(layout.required_output_length(14), 24)

    def test_rejects_invalid_values(self):
        with self.assertRaises(LayoutError):
            BatchLayout.contiguous(14, batch=0)
        with self.assertRaises(LayoutError):
            BatchLayout(1, 1, -1, 1, 1, 1)
        with self.assertRaises(LayoutError):
            BatchLayout(1, 1, 1, 1, 1.5, 1)


class TestLaunchConfig(unittest.TestCase):
    def test_example_grid(self):
        launch = LaunchConfig.for_transform(14, batch=3)

        self.assertEqual(launch.grid, (1, 1, 3))
        self.assertEqual(launch.block_size, 512)

    def test_grid_axes(self):
        launch = LaunchConfig.for_transform(64, batch=5, high_dimension=7, block_size=4)

        self.assertEqual(launch.grid, (5, 7, 5))

    def test_units_cover_every_pair(self):
        for block_size in (1, 2, 3, 512):
            for num_samples in range(4, 4200, 34):
                launch = LaunchConfig.for_transform(num_samples, 1, block_size=block_size)
                self.assertGreaterEqual(launch.units_per_row, num_samples // 4 + 1)

    def test_block_boundary(self):
        # N/4 == block size needs a second block for idx_p == N/4
        launch = LaunchConfig.for_transform(2048, batch=1, block_size=512)

        self.assertEqual(launch.grid[0], 2)

    def test_rejects_oversized_batch(self):
        with self.assertLogs("r2cfft.grid", level=logging.ERROR):
            with self.assertRaises(LaunchConfigError):
                LaunchConfig.for_transform(16, batch=MAX_GRID_DIM + 1)

    def test_rejects_oversized_high_dimension(self):
        with self.assertLogs("r2cfft.grid", level=logging.ERROR):
            with self.assertRaises(LaunchConfigError):
                LaunchConfig.for_transform(16, batch=1, high_dimension=MAX_GRID_DIM + 1)

    def test_limit_is_inclusive(self):
        launch = LaunchConfig.for_transform(16, batch=MAX_GRID_DIM, high_dimension=MAX_GRID_DIM)

        self.assertEqual(launch.grid[1:], (MAX_GRID_DIM, MAX_GRID_DIM))

    def test_rejects_invalid_grid(self):
        with self.assertRaises(LaunchConfigError):
            LaunchConfig(grid=(1, 1))
        with self.assertRaises(LaunchConfigError):
            LaunchConfig(grid=(1, 0, 1))

    def test_explicit_grid_respects_limit(self):
        with self.assertLogs("r2cfft.grid", level=logging.ERROR):
            with self.assertRaises(LaunchConfigError):
                LaunchConfig(grid=(1, 1, MAX_GRID_DIM + 5))
        with self.assertLogs("r2cfft.grid", level=logging.ERROR):
            with self.assertRaises(LaunchConfigError):
                LaunchConfig(grid=(1, MAX_GRID_DIM + 1, 1))
