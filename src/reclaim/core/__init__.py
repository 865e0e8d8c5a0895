"""Core engine: guard, collaborators, deleter and orchestration."""
