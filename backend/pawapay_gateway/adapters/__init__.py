"""
Wire adapters: one PaymentGatewayAdapter implementation per API version.
"""
from .base import PaymentGatewayAdapter
from .wire_v1 import WireV1Adapter
from .wire_v2 import WireV2Adapter

__all__ = ["PaymentGatewayAdapter", "WireV1Adapter", "WireV2Adapter"]
