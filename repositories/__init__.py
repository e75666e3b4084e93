"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates storage access for a specific domain entity.
Repositories read raw records from storage and return domain model objects.
"""
