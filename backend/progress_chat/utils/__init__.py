"""
Utility helpers
"""
from .data_uri import DataURI, DataURIError, parse_data_uri, build_data_uri, extension_for_mime
from .typing_effect import TypingEffect, wpm_for_text, chars_per_second, should_animate, chunk_sizes, CURSOR

__all__ = [
    "DataURI",
    "DataURIError",
    "parse_data_uri",
    "build_data_uri",
    "extension_for_mime",
    "TypingEffect",
    "wpm_for_text",
    "chars_per_second",
    "should_animate",
    "chunk_sizes",
    "CURSOR",
]
