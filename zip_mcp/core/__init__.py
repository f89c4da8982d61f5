# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL archive logic for the ZIP tool server.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Google ADK, or any protocol
#   code.  Every module here can be imported in a bare Python REPL and
#   exercised against real files on disk.
#
#   models.py   →  the "nouns": entries, option records, result records
#   errors.py   →  tagged error types (validation / precondition / backend)
#   backend.py  →  the only module that talks to the ZIP library (pyzipper)
#   archive.py  →  the operation handlers: echo, compress, decompress, info
# =============================================================================
