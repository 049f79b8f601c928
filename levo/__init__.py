"""
levo: generate source files from models and template sets.
"""

__version__ = "0.1.0"
