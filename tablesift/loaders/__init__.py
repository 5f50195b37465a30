"""File loaders producing Dataset objects."""

from .table_loader import load_dataset

__all__ = ['load_dataset']
