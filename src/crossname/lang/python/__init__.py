from .capture import LibCSTCaptureSource, capture_python_source

__all__ = ["LibCSTCaptureSource", "capture_python_source"]
