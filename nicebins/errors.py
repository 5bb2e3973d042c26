"""
Binning error taxonomy
"""
from typing import Optional


class BinningError(Exception):
    """Base exception for binning errors"""
    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.message)


class InvalidRangeError(BinningError):
    """Raised when min > max or a bound is not finite"""
    pass


class EmptyDatasetError(BinningError):
    """Raised when no valid values remain after filtering"""
    pass


class InvalidOptionsError(BinningError):
    """Raised when binning options fail validation"""
    pass
