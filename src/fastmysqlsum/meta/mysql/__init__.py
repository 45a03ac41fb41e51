"""
MySQL capture directory parser module
"""

from .parser import CaptureError, MySQLCaptureParser, load_capture

__all__ = ['CaptureError', 'MySQLCaptureParser', 'load_capture']
