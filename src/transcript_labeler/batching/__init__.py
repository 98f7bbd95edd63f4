"""
Batching of transcript snippets.

- batch_texts: greedy size-bounded packing
- extract_texts: tolerant entry filtering for request bodies
- flatten: order-preserving concatenation of per-batch results
"""

from transcript_labeler.batching.batcher import batch_texts, extract_texts, flatten

__all__ = ["batch_texts", "extract_texts", "flatten"]
