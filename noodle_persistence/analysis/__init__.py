"""
Database-side analysis jobs.
"""

from .ingredients import IngredientAnalyser, ingredient_popularity_pipeline, load_script

__all__ = ["IngredientAnalyser", "ingredient_popularity_pipeline", "load_script"]
