"""
Use cases that sit between routers and repositories.

Today this only holds authentication; record CRUD is thin enough that routers
call the collection repositories directly.
"""
