"""
Application Layer

Orchestrates domain objects and infrastructure adapters to fulfil use cases.

Structure:
- commands/: Messages accepted by the player orchestrator
- services/: Credential provider and player orchestrator
- interfaces/: Port interfaces for infrastructure adapters
"""
