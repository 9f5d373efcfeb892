"""
LoreChat Engine - Roleplay Chat Backend

Imports TavernAI/SillyTavern character cards (PNG or JSON), keeps
contacts, chat history and the world book (lorebook) store.
"""

__version__ = "0.1.0"
