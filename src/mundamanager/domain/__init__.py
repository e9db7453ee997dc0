"""Pure domain rules for gangs, fighters and their costs.

Nothing in this package touches the database session; functions read ORM
objects (or anything shaped like them) and return plain values.
"""
