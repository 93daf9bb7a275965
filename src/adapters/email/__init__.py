"""Email sender adapters - Console and HTTP API implementations."""

from .console import ConsoleEmailSender
from .http import HttpEmailSender

__all__ = ["ConsoleEmailSender", "HttpEmailSender"]
