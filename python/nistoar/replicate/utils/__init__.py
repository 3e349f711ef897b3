"""
Utility functions and classes used across the replication system
"""
from .logging import blab, BLAB, get_logger
