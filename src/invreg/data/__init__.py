"""
invreg.data
===========

submodule for handling training data and observed outcomes.

Includes:
- dataset: TrainingSet, SequenceObservation
"""

from .dataset import SequenceObservation, TrainingSet

__all__ = ["TrainingSet", "SequenceObservation"]
