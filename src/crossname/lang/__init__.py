from .languages import LanguageMap, detect_language, DEFAULT_EXTENSIONS
from .registry import CaptureRegistry

__all__ = ["LanguageMap", "detect_language", "DEFAULT_EXTENSIONS", "CaptureRegistry"]
