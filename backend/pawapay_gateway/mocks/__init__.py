"""
Offline stand-ins for the pawaPay API.
"""
from .sandbox_transport import REJECTION_MSISDNS, RecordedCall, RecordingTransport

__all__ = ["REJECTION_MSISDNS", "RecordedCall", "RecordingTransport"]
