import math
import torch

from .errors import R2CError


class TorchFFT(torch.nn.Module):
    """Half-length complex FFT along the last axis, delegated to torch.fft."""

    def forward(self, x):
        return torch.fft.fft(x, dim=-1)


class RadixTwoFFT(torch.nn.Module):
    def __init__(self, num_samples):
        super().__init__()

        if num_samples < 1 or num_samples & (num_samples - 1):
            raise R2CError(f"Radix-2 FFT needs a power of two length, got {num_samples}")

        self.num_samples = num_samples
        self.stages = int(math.log2(num_samples))
        self.register_buffer(
            "bit_reversed_indicies",
            self.bit_reverse_permutation(num_samples),
            persistent=False,
        )

    def forward(self, x):
        n = x.shape[-1]
        if n != self.num_samples:
            raise R2CError(f"Expected {self.num_samples} points along the last axis, got {n}")

        # Bit-reversal permutation on a copy, so the butterflies below never touch x
        x = x[..., self.bit_reversed_indicies]

        for stage in range(self.stages):
            group_size = 1 << (stage + 1)
            half_group = group_size >> 1

            num_groups = n // group_size
            group_indices = torch.arange(num_groups, device=x.device) * group_size

            # Twiddle factors for one group, shared by all groups
            j = torch.arange(half_group, device=x.device)
            angle = -2.0 * math.pi * j.to(torch.float64) / group_size
            twiddle = torch.polar(torch.ones_like(angle), angle).to(x.dtype)

            top_indices = (group_indices[:, None] + j).reshape(-1)
            bottom_indices = top_indices + half_group
            twiddle = twiddle.repeat(num_groups)

            top = x[..., top_indices]
            rotated = twiddle * x[..., bottom_indices]

            x[..., bottom_indices] = top - rotated
            x[..., top_indices] = top + rotated

        return x

    def bit_reverse_permutation(self, n):
        num_bits = n.bit_length() - 1
        indices = torch.arange(n)

        # Move bit k of every index to position num_bits - 1 - k
        reversed_indices = torch.zeros_like(indices)
        for bit in range(num_bits):
            reversed_indices |= ((indices >> bit) & 1) << (num_bits - 1 - bit)

        return reversed_indices


def make_backend(name, length):
    if name == "torch":
        return TorchFFT()
    if name == "radix2":
        return RadixTwoFFT(length)
    raise R2CError(f"Unknown FFT backend {name!r}, expected 'torch' or 'radix2'")
