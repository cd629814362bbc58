"""
pxevidence rolls validated peptide-spectrum matches up into PSM, peptide ion,
peptide and protein evidence.
"""

__version__ = "0.1.0"
