"""PrintNest gangsheet engine.

Packs print-ready design artwork from customer orders onto fixed-width
material rolls, persists the layouts and renders one file per roll.
"""

__version__ = "1.0.0"
