"""
Users Application

The shop owner profile and the salesmen who record sales.

FEATURES:
- Owner registration, profile update and logout (``user`` key)
- Salesmen with username, hashed password and commission rate
- Case-insensitive username login limited to active salesmen
- Expiring salesman sessions (``currentSalesman`` key)
- DRF authentication class for ``Authorization: Session <token>``
"""

__version__ = '1.0.0'
