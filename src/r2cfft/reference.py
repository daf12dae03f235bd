"""
Reference paths used to validate the post-process kernel.

``r2c_oracle`` is the trusted direct transform, ``r2c_sequential`` replays the
half-length FFT and recombination one batch entry and one index at a time, and
``post_process_inline`` is the kernel variant that evaluates its rotation
factors inline instead of reading a precomputed table.
"""

import cmath
import math

import torch

from .errors import check_transform_size

_FLOAT_DTYPES = (torch.float32, torch.float64)


def _real(inputs):
    # Integer and half precision samples are promoted to float32
    return inputs if inputs.dtype in _FLOAT_DTYPES else inputs.to(torch.float32)


def _half_spectra(inputs, num_samples, batch):
    half = num_samples // 2
    pairs = _real(inputs).reshape(batch, half, 2).contiguous()
    return torch.fft.fft(torch.view_as_complex(pairs), dim=-1)


def r2c_oracle(inputs, num_samples, batch):
    """Direct real-to-complex transform of ``batch`` rows of ``num_samples`` reals."""
    check_transform_size(num_samples)
    x = _real(inputs).reshape(batch, num_samples)
    return torch.fft.rfft(x, dim=-1)


def r2c_sequential(inputs, num_samples, batch):
    """Half-length FFT followed by a scalar, per-index recombination.

    Rotation factors are computed for every index with ``cmath.exp`` rather
    than read from a table.
    """
    check_transform_size(num_samples)
    half = num_samples // 2
    spectra = _half_spectra(inputs, num_samples, batch)

    outputs = torch.empty(batch, half + 1, dtype=spectra.dtype)
    for b in range(batch):
        z = spectra[b].tolist()

        row = [0j] * (half + 1)
        row[0] = complex(z[0].real + z[0].imag, 0.0)
        for r in range(1, half):
            omega = cmath.exp(complex(0.0, -2.0 * math.pi * r / num_samples))
            zr = z[r]
            zt = z[half - r].conjugate()
            row[r] = zr * (1 - 1j * omega) * 0.5 + zt * (1 + 1j * omega) * 0.5
        row[half] = complex(z[0].real - z[0].imag, 0.0)

        outputs[b] = torch.tensor(row, dtype=spectra.dtype)

    return outputs


def post_process_inline(spectrum, num_samples):
    """Recombine half-length spectra (..., N/2) with rotation factors computed on the fly."""
    check_transform_size(num_samples)
    half = num_samples // 2

    r = torch.arange(1, half, device=spectrum.device)
    angle = -2.0 * math.pi * r.to(torch.float64) / num_samples
    omega = torch.polar(torch.ones_like(angle), angle).to(spectrum.dtype)

    p = spectrum[..., r]
    conj_q = spectrum[..., half - r].conj()
    middle = (p + conj_q) * 0.5 - (p - conj_q) * omega * 0.5j

    head = spectrum[..., :1]
    zero = torch.zeros_like(head.real)
    dc = torch.complex(head.real + head.imag, zero)
    nyquist = torch.complex(head.real - head.imag, zero)

    return torch.cat((dc, middle, nyquist), dim=-1)
