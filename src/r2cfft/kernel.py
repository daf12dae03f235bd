import torch

from .errors import LaunchConfigError, LayoutError, R2CError, check_transform_size
from .grid import BLOCK_SIZE, LaunchConfig
from .twiddle import TwiddleTable


class R2CPostProcess(torch.nn.Module):
    """Turns a half-length complex FFT into the N/2 + 1 outputs of a real FFT.

    Every unit of work owns one symmetric pair (idx_p, idx_q = N/2 - idx_p)
    with 0 <= idx_p <= N/4, so each output location is written by exactly one
    unit. Units are laid out on a three axis grid: position in the transform,
    outer-dimension row and batch entry.
    """

    def __init__(self, num_samples, block_size=BLOCK_SIZE, dtype=torch.complex64):
        super().__init__()

        self.num_samples = check_transform_size(num_samples)
        self.block_size = block_size
        self.dtype = dtype

        self.half = num_samples >> 1
        self.quarter = num_samples >> 2

        twiddles = TwiddleTable(num_samples).generate(dtype=dtype)
        self.register_buffer("twiddles", twiddles, persistent=False)

    def forward(self, input, layout, output=None, launch=None):
        if output is None:
            output = input
        self._check_buffers(input, output, layout)

        if launch is None:
            launch = LaunchConfig.for_transform(
                self.num_samples, layout.batch, layout.high_dimension, self.block_size
            )
        self._check_launch(launch, layout)

        device = input.device
        in_base, out_base = layout.offset_grid(device=device)

        # Units past N/4 map onto pairs that are already covered
        units = torch.arange(launch.units_per_row, device=device)
        idx_p = units[(units >= 1) & (units <= self.quarter)]
        idx_q = self.half - idx_p

        # Gather phase. Indexing copies p and q out of the buffer, so every
        # read of the launch completes before the first write below.
        p0 = input[in_base[..., 0]]
        p = input[in_base + idx_p]
        q = input[in_base + idx_q]

        # Scatter phase
        zero = torch.zeros_like(p0.real)
        output[out_base[..., 0]] = torch.complex(p0.real + p0.imag, zero)
        output[out_base[..., 0] + self.half] = torch.complex(p0.real - p0.imag, zero)

        u = torch.complex((p.real + q.real) * 0.5, (p.imag - q.imag) * 0.5)
        v = torch.complex((p.imag + q.imag) * 0.5, (p.real - q.real) * 0.5)

        out_p = u + v.conj() * self.twiddles[idx_p]
        out_q = u.conj() + v * self.twiddles[idx_q]

        output[out_base + idx_p] = out_p

        # With N divisible by 4 the last pair is self-paired (idx_p == idx_q)
        paired = idx_q != idx_p
        output[(out_base + idx_q)[..., paired]] = out_q[..., paired]

        return output

    def _check_launch(self, launch, layout):
        if launch.units_per_row < self.quarter + 1:
            raise LaunchConfigError(
                f"grid {launch.grid} with block {launch.block_size} runs "
                f"{launch.units_per_row} units per row, N={self.num_samples} needs "
                f"{self.quarter + 1}"
            )
        if tuple(launch.grid[1:]) != (layout.high_dimension, layout.batch):
            raise LaunchConfigError(
                f"grid rows and batches {tuple(launch.grid[1:])} do not match the "
                f"layout ({layout.high_dimension}, {layout.batch})"
            )

    def _check_buffers(self, input, output, layout):
        for name, buffer in (("input", input), ("output", output)):
            if buffer.dim() != 1:
                raise LayoutError(f"{name} must be a flat 1-D buffer, got {tuple(buffer.shape)}")
            if buffer.dtype != self.dtype:
                raise R2CError(f"{name} dtype {buffer.dtype} does not match {self.dtype}")

        if input.numel() < layout.required_input_length(self.num_samples):
            raise LayoutError(
                f"input holds {input.numel()} values, layout needs "
                f"{layout.required_input_length(self.num_samples)}"
            )
        if output.numel() < layout.required_output_length(self.num_samples):
            raise LayoutError(
                f"output holds {output.numel()} values, layout needs "
                f"{layout.required_output_length(self.num_samples)}"
            )

    def extra_repr(self):
        return f"num_samples={self.num_samples}, block_size={self.block_size}, dtype={self.dtype}"
