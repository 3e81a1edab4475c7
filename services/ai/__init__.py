# AI services module

from .word_analysis import (
    AIWordRecord,
    AnalysisResult,
    AnalysisStatus,
    WordAnalysisGateway,
    get_word_analysis_gateway,
)

__all__ = [
    "AIWordRecord",
    "AnalysisResult",
    "AnalysisStatus",
    "WordAnalysisGateway",
    "get_word_analysis_gateway",
]
