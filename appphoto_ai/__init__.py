"""
AppPhoto AI - Intelligent document and photo analysis.

This package reads genealogical records (birth and baptism certificates) out of
document images with a multimodal model and hosts a streaming chat assistant
backed by the same model family.
"""

__version__ = "0.1.0"
__author__ = "AppPhoto AI Contributors"
