"""
Service layer abstraction.

Services encapsulate the business rules of a domain.  The issue store
keeps its data in process memory; handlers only ever talk to it
through its public methods.
"""
