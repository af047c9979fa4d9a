"""
ptask: parametric task configuration engine.

Builds human-readable construction task names ("Mampostería de 18 cm.") from
cascading parameter choices.
"""

__version__ = "0.1.0"
