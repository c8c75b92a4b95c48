"""
Shared building blocks for ReWear apps.

- exceptions: error taxonomy every service error belongs to
- gateway: document-store access (get, conditional write, query, subscribe)
- http: translation of service errors into API responses
"""
