"""
API Layer

Read-mostly HTTP surface (server.py) and the summary DTO mapper
(mapper.py). Import the server module explicitly; it needs FastAPI.
"""
