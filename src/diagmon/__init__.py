"""diagmon: State monitor diagnostics engine.

Turns topic and transform liveness statistics into severity-ranked
diagnostic reports, one per registered rule per tick.
"""

__version__ = "0.1.0"
