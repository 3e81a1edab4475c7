"""
Prompts Package

LLM prompt engineering for word analysis.
"""

from services.ai.prompts.word_prompts import (
    WORD_ANALYSIS_SYSTEM_PROMPT,
    WORD_ANALYSIS_HUMAN_PROMPT,
    build_word_analysis_prompt,
)

__all__ = [
    'WORD_ANALYSIS_SYSTEM_PROMPT',
    'WORD_ANALYSIS_HUMAN_PROMPT',
    'build_word_analysis_prompt',
]
