"""
QUERIES - Read operations (CQRS)

Queries retrieve data without modifying state. Each query has:
- Query class: Parameters for the read
- Handler class: Executes the read

Subfolders:
- conversations/ → list_conversations, get_conversation, get_permissions
- lenders/       → request_lender_matches
"""
