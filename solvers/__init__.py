"""
Solvers module for the result scraper.

Submodules:
    captcha: ``ArithmeticCaptchaSolver`` and ``calculate_captcha`` for the
        two-operand addition captcha shown on the results form.
"""

from .captcha import ArithmeticCaptchaSolver, calculate_captcha

__all__ = ["ArithmeticCaptchaSolver", "calculate_captcha"]
