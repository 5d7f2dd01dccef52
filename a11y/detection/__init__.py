"""
Detection Module.

Interaction sample buffers, element classification and the three detection
rule families (visual acuity, contrast, inactivity).
"""

from a11y.detection.sample_buffers import HoverSample, ClickSample, SampleBuffers
from a11y.detection.element_classifier import (
    ElementRef,
    ElementClassifier,
    DefaultElementClassifier,
    is_excluded_surface,
)
from a11y.detection.visual_acuity import VisualAcuityRule
from a11y.detection.contrast_cascade import ContrastRule, clicks_clustered
from a11y.detection.inactivity import InactivityRule

__all__ = [
    "HoverSample",
    "ClickSample",
    "SampleBuffers",
    "ElementRef",
    "ElementClassifier",
    "DefaultElementClassifier",
    "is_excluded_surface",
    "VisualAcuityRule",
    "ContrastRule",
    "clicks_clustered",
    "InactivityRule",
]
