"""Business logic services.

Services contain all business logic and are called by routes.
Every collaborator (gateway, SMS client, storage, page cache) is passed
in explicitly; services never reach for process globals.
"""
