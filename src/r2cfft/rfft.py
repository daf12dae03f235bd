import math
import torch

from .addressing import BatchLayout
from .backend import make_backend
from .errors import LayoutError, R2CError, check_transform_size
from .grid import BLOCK_SIZE
from .launch import PostProcessLauncher

_REAL_DTYPES = {torch.complex64: torch.float32, torch.complex128: torch.float64}


class RealFFT(torch.nn.Module):
    """Real-input FFT computed as a half-length complex FFT plus a post-process.

    Accepts real tensors shaped (N,), (batch, N) or (batch, rows..., N); the
    rows of multi-dimensional inputs run on the outer-dimension axis of the
    launch grid. Returns N/2 + 1 complex values per row.
    """

    def __init__(
        self,
        num_samples,
        in_place=False,
        backend="torch",
        block_size=BLOCK_SIZE,
        dtype=torch.complex64,
        device=None,
    ):
        super().__init__()
        self.num_samples = check_transform_size(num_samples)
        self.in_place = in_place
        if dtype not in _REAL_DTYPES:
            raise R2CError(f"Unsupported complex dtype {dtype}")
        self.dtype = dtype

        self.launcher = PostProcessLauncher(
            num_samples, block_size=block_size, dtype=dtype, device=device
        )
        self.backend = make_backend(backend, num_samples // 2).to(self.launcher.device)

    def forward(self, x):
        if x.shape[-1] != self.num_samples:
            raise LayoutError(
                f"Expected {self.num_samples} samples along the last axis, got {x.shape[-1]}"
            )

        lead = x.shape[:-1]
        batch = lead[0] if len(lead) > 0 else 1
        high_dimension = math.prod(lead[1:])
        half = self.num_samples // 2

        # N reals viewed as N/2 complex values (even samples real, odd imaginary)
        pairs = x.to(_REAL_DTYPES[self.dtype]).reshape(-1, half, 2).contiguous()
        spectrum = self.backend(torch.view_as_complex(pairs).to(self.launcher.device))

        layout = BatchLayout.contiguous(
            self.num_samples, batch, high_dimension, in_place=self.in_place
        )
        if self.in_place:
            buffer = torch.zeros(
                batch * high_dimension, half + 1, dtype=self.dtype, device=spectrum.device
            )
            buffer[:, :half] = spectrum
            out = self.launcher(buffer.view(-1), layout)
        else:
            out = torch.empty(
                batch * high_dimension * (half + 1), dtype=self.dtype, device=spectrum.device
            )
            out = self.launcher(spectrum.reshape(-1), layout, out)

        return out.view(*lead, half + 1)
