"""Line-level text processing for Naninovel scripts."""

from .classifier import classify, is_skip
from .markup import normalize
from .parser import parse
from .tokenizer import count_words, tokenize

__all__ = ["classify", "count_words", "is_skip", "normalize", "parse", "tokenize"]
