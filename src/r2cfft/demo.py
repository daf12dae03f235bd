import argparse
import logging
import sys

import torch

from .addressing import BatchLayout
from .errors import R2CError, check_transform_size
from .launch import PostProcessLauncher
from .reference import r2c_oracle, r2c_sequential
from .report import assert_close, summarize

logger = logging.getLogger("r2cfft.demo")

NUM_SAMPLES = 14
BATCH = 3


def example_inputs(num_samples, batch):
    i = torch.arange(num_samples * batch)
    return ((i + 1) * 5 - (i % 7)).to(torch.float32)


def run_demo(num_samples=NUM_SAMPLES, batch=BATCH, in_place=True, device=None):
    """Compare the kernel path with the oracle and the sequential recombination."""
    check_transform_size(num_samples)
    layout = BatchLayout.contiguous(num_samples, batch, in_place=in_place)

    inputs = example_inputs(num_samples, batch)
    half = num_samples // 2

    results = {
        "ref": r2c_oracle(inputs, num_samples, batch),
        "cpu": r2c_sequential(inputs, num_samples, batch),
    }

    launcher = PostProcessLauncher(num_samples, device=device)
    spectra = torch.fft.fft(torch.view_as_complex(inputs.reshape(batch, half, 2)), dim=-1)
    if in_place:
        # N + 2 reals per batch entry so the N/2 + 1 outputs fit over the input
        buffer = torch.zeros(batch, half + 1, dtype=torch.complex64)
        buffer[:, :half] = spectra
        kernel_out = launcher(buffer.view(-1), layout)
    else:
        kernel_out = torch.empty(batch * (half + 1), dtype=torch.complex64)
        launcher(spectra.reshape(-1), layout, kernel_out)
    results["gpu" if launcher.device.type == "cuda" else "kernel"] = kernel_out.view(batch, half + 1)

    for tag, outputs in results.items():
        summarize(tag, outputs)
        assert_close(results["ref"], outputs, tag=tag)

    logger.info(
        "post-process of %d x %d took %.4f ms", batch, num_samples, launcher.last_elapsed_ms
    )
    return results


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Real-to-complex FFT post-process check against reference transforms"
    )
    parser.add_argument("--num-samples", type=int, default=NUM_SAMPLES, help="real transform length N")
    parser.add_argument("--batch", type=int, default=BATCH, help="number of transforms")
    parser.add_argument("--out-of-place", action="store_true", help="write to a separate output buffer")
    parser.add_argument("--device", default=None, help="torch device, defaults to cuda when available")
    parser.add_argument("-v", "--verbose", action="store_true", help="log launch diagnostics")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_demo(args.num_samples, args.batch, in_place=not args.out_of_place, device=args.device)
    except R2CError as e:
        logger.error("%s", e)
        return 1

    logger.info("done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
