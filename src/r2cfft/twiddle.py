import math
import torch

from .errors import check_transform_size


class TwiddleTable:
    """Unit-circle rotation factors w[i] = exp(-2*pi*i*i/N) for a length N transform."""

    def __init__(self, length):
        self.length = check_transform_size(length)

    def generate(self, dtype=torch.complex64, device=None):
        # Evaluated in double precision, then narrowed to the storage dtype
        i = torch.arange(self.length, dtype=torch.float64, device=device)
        angle = -2.0 * math.pi * i / self.length

        table = torch.complex(torch.cos(angle), torch.sin(angle))
        return table.to(dtype)

    def __len__(self):
        return self.length

    def __repr__(self):
        return f"{self.__class__.__name__}(length={self.length})"
