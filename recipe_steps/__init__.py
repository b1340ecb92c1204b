"""Recipe step dependency tracking.

Keeps the "uses output of" relationships between numbered recipe steps
consistent while steps are created, edited, reordered and deleted.
"""

__version__ = "0.1.0"
