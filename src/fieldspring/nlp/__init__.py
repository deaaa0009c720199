"""NLP pipeline integration."""

from fieldspring.nlp.pipeline import create_pipeline, entities, get_nlp, surface_forms

__all__ = ["create_pipeline", "entities", "get_nlp", "surface_forms"]
