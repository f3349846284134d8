# Common utilities
from triallic.common.codec import TokenCodec as TokenCodec
from triallic.common.crypto import CryptoUtils as CryptoUtils
from triallic.common.logging_utils import setup_logger as setup_logger

__all__ = ["CryptoUtils", "TokenCodec", "setup_logger"]
