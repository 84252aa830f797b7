class ProcessingError(ValueError):
    """Base class for invalid input rejected before any pixel is touched."""


class UnknownColorSpaceError(ProcessingError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown color space: {name!r} (expected one of rgb, hsv, hsl, hsi, yuv)")


class UnknownActionError(ProcessingError):
    def __init__(self, action):
        self.action = action
        super().__init__(f"Unknown action: {action}")


class InvalidThresholdError(ProcessingError):
    pass


class InvalidImageError(ProcessingError):
    pass


class EmptyImageError(ProcessingError):
    """Raised when a statistic is requested over zero pixels."""


class InvalidScaleError(ProcessingError):
    pass
