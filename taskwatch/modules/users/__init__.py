"""
User Administration Module

User management split by concern:
- auth: Admin capability check and caller resolution
- domain: Domain models and errors
- services: Business logic, validation and password hashing
- repositories: Data access
- api: GraphQL schema and router
"""
