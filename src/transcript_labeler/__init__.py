"""
Transcript Labeler for design-conversation transcripts.

Labels short transcript snippets as problem-oriented (PROB),
solution-oriented (SOLN) or unlabeled using a remote language model:
- Greedy size-bounded batching of snippets
- Process-wide FIFO throughput limiter in front of the remote model
- Defensive parsing of model output with an explicit fallback path
- Per-caller hourly quotas keyed on a trust header

Architecture: FastAPI orchestrator + Anthropic Messages API + tolerant response parsing
"""

__version__ = "0.1.0"
