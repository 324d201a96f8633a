"""Screenshot capture support: errors, pixel conversion, buffer pooling, GPU encoder front end and statistics."""

__version__ = "1.0.0"