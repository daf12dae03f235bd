from dataclasses import dataclass

import torch

from .errors import LayoutError


@dataclass(frozen=True)
class BatchLayout:
    """Strided placement of batched (and multi-row) transforms in flat buffers.

    Strides step between rows of the outer dimension, distances step between
    batch entries. All values are counted in complex elements.
    """

    batch: int
    high_dimension: int
    input_stride: int
    output_stride: int
    input_distance: int
    output_distance: int

    def __post_init__(self):
        for name in ("batch", "high_dimension"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise LayoutError(f"{name} must be a positive integer, got {value!r}")
        for name in (
            "input_stride",
            "output_stride",
            "input_distance",
            "output_distance",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise LayoutError(
                    f"{name} must be a non-negative integer, got {value!r}"
                )

    @classmethod
    def contiguous(cls, num_samples, batch, high_dimension=1, in_place=False):
        """Dense layout: N/2 complex per input row, N/2 + 1 per output row.

        In-place layouts pad every input row to N/2 + 1 so that input and
        output rows coincide.
        """
        output_row = num_samples // 2 + 1
        input_row = output_row if in_place else num_samples // 2
        return cls(
            batch=batch,
            high_dimension=high_dimension,
            input_stride=input_row,
            output_stride=output_row,
            input_distance=input_row * high_dimension,
            output_distance=output_row * high_dimension,
        )

    def input_offset(self, batch_index, row_index=0):
        return batch_index * self.input_distance + row_index * self.input_stride

    def output_offset(self, batch_index, row_index=0):
        return batch_index * self.output_distance + row_index * self.output_stride

    def offset_grid(self, device=None):
        """Base offsets for every (batch, row) slice, shaped (batch, high_dimension, 1)."""
        b = torch.arange(self.batch, device=device).view(-1, 1, 1)
        r = torch.arange(self.high_dimension, device=device).view(1, -1, 1)
        return self.input_offset(b, r), self.output_offset(b, r)

    def required_input_length(self, num_samples):
        last = self.input_offset(self.batch - 1, self.high_dimension - 1)
        return last + num_samples // 2

    def required_output_length(self, num_samples):
        last = self.output_offset(self.batch - 1, self.high_dimension - 1)
        return last + num_samples // 2 + 1
