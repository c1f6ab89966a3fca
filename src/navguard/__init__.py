"""
navguard: strip navigation-redirect assignments from untrusted JavaScript.
"""

from navguard.sanitization.sanitizer import NavigationSanitizer, sanitize_code

__version__ = "0.1.0"

__all__ = ["NavigationSanitizer", "sanitize_code", "__version__"]
