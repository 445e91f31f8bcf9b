"""Daily Grid Application Package — daily 3x3 tennis trivia grid service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
