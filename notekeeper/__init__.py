"""
Notekeeper.

Local notes client core: repository, use cases and screen controllers.

- core/: Configuration, logging, database, reactive stream primitives
- models/: SQLAlchemy table definitions
- schemas/: Note value type, screen states, intents and effects
- repositories/: Persistence access with live queries
- usecases/: One named operation per business action
- controllers/: Intent -> state -> effect screen controllers
"""

__version__ = "0.1.0"
