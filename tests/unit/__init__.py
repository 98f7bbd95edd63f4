"""
Unit tests for the Transcript Labeler.

Test individual components in isolation:
- Batching (greedy packing, oversized snippets, entry filtering)
- Quota tracker and throughput limiter (fake clocks, concurrency)
- Response parsing (strict, extracted, fallback, reconciliation)
- Anthropic client (httpx.MockTransport)
- Gateway and orchestrator (stub clients, debug modes)
"""
