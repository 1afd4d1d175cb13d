"""Context fitness selection, integer DCT, quantization and JPEG double-compression embedding."""

__version__ = "0.1.0"

__all__ = ["context_fitness", "dct", "embedding", "quantization"]