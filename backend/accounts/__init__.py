# accounts/__init__.py
"""
Accounts app - authentication, users and branches.

This app provides:
- Branch: the unit every financial row is scoped to
- User: custom user model with a role (ADMIN / ACCOUNTANT) and a branch
- ActorContext: authorization context and branch scoping helpers
"""
