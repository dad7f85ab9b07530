"""
Unit tests for the API dispatch client.

Test individual components in isolation:
- Origin resolution and URL construction
- Body encoding and response classification
- Timeout guard and cancellation
- Retry controller and attempt history
- Request orchestrator over a mocked transport
- httpx transport over httpx.MockTransport
"""
