"""Domain layer (records, references, and derived statistics).

Domain modules do no IO. They parse payloads the infrastructure layer fetched
and compute views over them.
"""
