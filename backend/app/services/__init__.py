"""
Services Layer

Championship engine services that:
- Accept domain inputs (IDs, sessions, rosters, dates)
- Return domain outputs (models, dataclasses, summary dicts)
- Do NOT depend on HTTP request/response objects
- Own their transactions: a generation step commits once or rolls back
"""
