"""
COMMANDS - Write operations (CQRS)

Each command has:
- Command class: frozen dataclass with the input
- Handler class: loads the conversation, mutates it under its lock, saves

Subfolders:
- conversations/ → create_conversation, add_participant, advance_status, update_deal
- chat/          → send_message
- lenders/       → select_lender
"""
