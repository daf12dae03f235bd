from .addressing import BatchLayout
from .backend import RadixTwoFFT, TorchFFT, make_backend
from .errors import (
    InvalidTransformSizeError,
    LaunchConfigError,
    LayoutError,
    NumericMismatchError,
    R2CError,
)
from .grid import BLOCK_SIZE, MAX_GRID_DIM, LaunchConfig
from .kernel import R2CPostProcess
from .launch import PostProcessLauncher
from .reference import post_process_inline, r2c_oracle, r2c_sequential
from .report import assert_close, max_relative_error, summarize
from .rfft import RealFFT
from .twiddle import TwiddleTable

__version__ = "0.1.0"
