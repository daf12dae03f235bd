import logging
from dataclasses import dataclass
from typing import Tuple

from .errors import LaunchConfigError

logger = logging.getLogger("r2cfft.grid")

BLOCK_SIZE = 512
# Per-axis limit on the row and batch axes of a launch grid
MAX_GRID_DIM = 65535


@dataclass(frozen=True)
class LaunchConfig:
    """Launch grid (x: position in transform, y: outer row, z: batch entry)."""

    grid: Tuple[int, int, int]
    block_size: int = BLOCK_SIZE

    def __post_init__(self):
        if len(self.grid) != 3:
            raise LaunchConfigError(f"Grid must have 3 axes, got {self.grid}")
        if self.block_size <= 0 or any(g <= 0 for g in self.grid):
            raise LaunchConfigError(
                f"Grid {self.grid} and block size {self.block_size} must be positive"
            )

        high_dimension, batch = self.grid[1], self.grid[2]
        if batch > MAX_GRID_DIM or high_dimension > MAX_GRID_DIM:
            logger.error(
                "batch %d or high dimension %d exceeds the launch limit %d",
                batch,
                high_dimension,
                MAX_GRID_DIM,
            )
            raise LaunchConfigError(
                f"batch ({batch}) and high_dimension ({high_dimension}) "
                f"must not exceed {MAX_GRID_DIM}"
            )

    @classmethod
    def for_transform(cls, num_samples, batch, high_dimension=1, block_size=BLOCK_SIZE):
        # At least one unit per idx_p in [0, N/4], so N/4 + 1 units
        blocks = (num_samples // 4) // block_size + 1
        return cls(grid=(blocks, high_dimension, batch), block_size=block_size)

    @property
    def units_per_row(self):
        return self.grid[0] * self.block_size
