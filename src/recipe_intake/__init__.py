"""
Recipe Intake - turns recipe photos, pasted text and page text into
structured recipes.

Packages:
- recipe_import: normalization, extraction and validation of model output
- jobs: extraction job lifecycle, polling and per-user quotas
- tools: cooking quantity arithmetic (fractions, scaling)
"""

__version__ = "1.0.0"
