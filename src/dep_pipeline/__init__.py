"""Rule-driven dependency tree builder for chunked, POS-tagged sentences."""

from .models import MatchResult, Node, Rule, Sentence
from .pipeline import build_dependencies

__all__ = ["Node", "Rule", "MatchResult", "Sentence", "build_dependencies"]
