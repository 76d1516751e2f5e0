"""
draftkit - CapCut / Jianying draft project assembler.

Takes a narration track, a set of still images and an optional SRT file
and produces an openable editor draft: asset scan → caption parse →
timeline build → document serialization → installation into the
editor's draft store.
"""

__version__ = "0.1.0"
