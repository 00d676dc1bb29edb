"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- persistence/: Conversation repositories (in-memory, Redis)
- cache/: Async Redis client factory
- storage/: Attachment files on local disk
- external/: Customer directory clients (HTTP, in-memory)
"""
