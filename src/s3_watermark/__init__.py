"""Batch watermarking of images stored in S3."""

__version__ = "0.1.0"
