class R2CError(ValueError):
    """Base class for rejected real-to-complex transform requests."""


class InvalidTransformSizeError(R2CError):
    pass


class LayoutError(R2CError):
    pass


class LaunchConfigError(R2CError):
    pass


class NumericMismatchError(R2CError, AssertionError):
    pass


def check_transform_size(num_samples):
    if not isinstance(num_samples, int) or isinstance(num_samples, bool):
        raise InvalidTransformSizeError(
            f"Transform length must be an integer, got {num_samples!r}"
        )
    if num_samples < 4 or num_samples % 2 != 0:
        raise InvalidTransformSizeError(
            f"Transform length must be even and >= 4, got {num_samples}"
        )
    return num_samples
