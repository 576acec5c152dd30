"""
Output sinks for accepted records
"""

from .dataset_writer import DatasetWriter

__all__ = [
    'DatasetWriter'
]
