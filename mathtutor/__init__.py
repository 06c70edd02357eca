"""
Math tutor answer-evaluation and problem-generation pipeline.
"""

__version__ = "0.1.0"
