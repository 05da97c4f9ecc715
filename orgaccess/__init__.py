"""
orgaccess
Authorization and hierarchy-consistency core for sites, departments,
user groups, roles and permissions.
"""

__version__ = "0.1.0"
