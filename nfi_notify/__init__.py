"""NFI REPORT transactional notification service"""

__version__ = "1.0.0"
