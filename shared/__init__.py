"""
shared/__init__.py

Shared models used across the service, repository, API and client layers.

This package contains:
- models: request/response records (GenerationResult, UpstreamCompletion, TraceContext)
- result: the error taxonomy and the Ok/Err result type
"""
