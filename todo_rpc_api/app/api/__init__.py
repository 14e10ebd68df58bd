"""
API package: procedure tables, the application router and the HTTP
transport that exposes it.
"""
