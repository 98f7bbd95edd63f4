"""
Integration tests for the Transcript Labeler.

Test components together or against real external services:
- API endpoints (FastAPI TestClient with overridden dependencies)
- Anthropic API (real calls, marked with @pytest.mark.integration)
"""
