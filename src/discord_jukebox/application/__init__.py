"""
Application Layer

Orchestrates domain objects and infrastructure ports to fulfil commands.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: Resolver, session registry, playback and event notification
"""
