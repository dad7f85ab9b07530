"""
Integration tests for the API dispatch client.

Drive ApiClient end-to-end through HttpxTransport, with the network replaced
by httpx.MockTransport handlers.
"""
