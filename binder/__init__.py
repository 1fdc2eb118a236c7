"""
Pod Upstream Binder

Event-driven binding of pods to the services that front them.
"""

__version__ = "0.1.0"
