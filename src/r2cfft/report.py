import logging

import torch

from .errors import NumericMismatchError

logger = logging.getLogger("r2cfft.report")

TOLERANCE = 1e-5


def summarize(tag, outputs, preview=16):
    """Log the leading values and the sum of a tagged run; return the sum."""
    flat = outputs.reshape(-1).to(torch.complex128).cpu()
    shown = ", ".join(f"({z.real:.6e}, {z.imag:.6e})" for z in flat[:preview].tolist())
    total = complex(flat.sum().item())

    logger.info("%s cplx output: %s", tag, shown)
    logger.info("%s sum: (%.6e, %.6e)", tag, total.real, total.imag)
    return total


def max_relative_error(reference, actual):
    """Largest elementwise error, relative to the largest reference magnitude."""
    reference = reference.reshape(-1).to(torch.complex128).cpu()
    actual = actual.reshape(-1).to(torch.complex128).cpu()
    if reference.shape != actual.shape:
        raise NumericMismatchError(
            f"Shape mismatch: {tuple(reference.shape)} vs {tuple(actual.shape)}"
        )

    scale = reference.abs().max().item()
    error = (reference - actual).abs().max().item()
    return error / scale if scale > 0 else error


def assert_close(reference, actual, tolerance=TOLERANCE, tag="output"):
    error = max_relative_error(reference, actual)
    if error > tolerance:
        raise NumericMismatchError(
            f"{tag} differs from reference: relative error {error:.3e} > {tolerance:.1e}"
        )
    logger.debug("%s matches reference, relative error %.3e", tag, error)
    return error
