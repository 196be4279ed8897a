from fintrack.database import Base

# Import all models here so metadata.create_all sees them
from fintrack.models.user import User
from fintrack.models.transaction import Transaction

__all__ = ["Base", "User", "Transaction"]
