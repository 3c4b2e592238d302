"""Keyphrase extraction and scoring"""

from .extract import extract_keyphrases, extract_keyphrases_enriched, rank_keyphrases

__all__ = ['extract_keyphrases', 'extract_keyphrases_enriched', 'rank_keyphrases']
