"""Gradient Studio: compose, AI-generate and export CSS gradients."""

from .colors import normalize
from .css import compile_gradient, css_declaration
from .model import GradientDescription, GradientStop

__all__ = [
    "GradientDescription",
    "GradientStop",
    "compile_gradient",
    "css_declaration",
    "normalize",
]
