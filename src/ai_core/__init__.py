"""
AI Core Module for Alpha Visa Diagnosis

Claude-powered narrative analysis of scored diagnoses.
"""

from .claude_client import AnalysisClient, AnalysisResult, fallback_analysis

__all__ = [
    'AnalysisClient',
    'AnalysisResult',
    'fallback_analysis',
]
