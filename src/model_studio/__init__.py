"""Model Studio - E-commerce model photographs from product shots."""

__version__ = "0.1.0"
