"""
DOMAIN LAYER - Deal conversations

This layer contains:
- Entities: Conversation aggregate, Message, Participant, LenderRecommendation
- Value Objects: ids, lifecycle stages, roles, urgency, risk profile
- Ports: Interfaces that infrastructure implements (repository, clock, stores)
- Services: Pure decision logic (assistant replies, lender matching, worklist)
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Redis, Pydantic, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
