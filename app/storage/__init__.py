"""
Persistence for users and notes.

    base     - repository interfaces
    sql      - SQLAlchemy implementation
    memory   - in-process implementation
    factory  - backend selection and the request dependency
"""
