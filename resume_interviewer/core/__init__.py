"""
Core interview logic: errors, the client state machine and the candidate read model.
"""
