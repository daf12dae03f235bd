import logging
import time

import torch

from .grid import BLOCK_SIZE, LaunchConfig
from .kernel import R2CPostProcess

logger = logging.getLogger("r2cfft.launch")


class PostProcessLauncher:
    """Moves buffers to the compute device, runs the post-process kernel and times it."""

    def __init__(self, num_samples, block_size=BLOCK_SIZE, dtype=torch.complex64, device=None):
        self.device = torch.device(device) if device is not None else self.default_device()
        self.kernel = R2CPostProcess(num_samples, block_size=block_size, dtype=dtype).to(self.device)
        self.last_elapsed_ms = None

    @staticmethod
    def default_device():
        return torch.device("cuda") if torch.cuda.is_available() else torch.device("cpu")

    @property
    def num_samples(self):
        return self.kernel.num_samples

    def __call__(self, input, layout, output=None):
        """Run the post-process over every (batch, row) slice of ``layout``.

        ``output=None`` runs in place. Results land in the caller's buffer,
        which is also returned.
        """
        launch = LaunchConfig.for_transform(
            self.num_samples, layout.batch, layout.high_dimension, self.kernel.block_size
        )
        in_place = output is None or output.data_ptr() == input.data_ptr()

        d_input = input.to(self.device)
        d_output = d_input if in_place else output.to(self.device)

        with torch.no_grad():
            elapsed = self._timed(lambda: self.kernel(d_input, layout, d_output, launch))
        self.last_elapsed_ms = elapsed

        logger.debug(
            "run with grid %d, %d, %d, block %d, %s, elapsed (milliseconds): %.4f",
            *launch.grid,
            launch.block_size,
            "in-place" if in_place else "out-of-place",
            elapsed,
        )

        target = input if in_place else output
        if d_output.data_ptr() != target.data_ptr():
            target.copy_(d_output)
        return target

    def _timed(self, run):
        if self.device.type == "cuda":
            start = torch.cuda.Event(enable_timing=True)
            stop = torch.cuda.Event(enable_timing=True)
            start.record()
            run()
            stop.record()
            torch.cuda.synchronize(self.device)
            return start.elapsed_time(stop)

        start = time.perf_counter()
        run()
        return (time.perf_counter() - start) * 1000.0
