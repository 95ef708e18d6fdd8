from .catalog import Product
from .sales import Sale, SaleItem
from .shifts import Shift
from .auth import User, Profile, UserRole, SessionToken

# Table name -> model, the lookup the SQL data store uses for generic CRUD
TABLES = {
    model.__tablename__: model
    for model in (Product, Sale, SaleItem, Shift, User, Profile, UserRole, SessionToken)
}

__all__ = [
    'Product', 'Sale', 'SaleItem', 'Shift',
    'User', 'Profile', 'UserRole', 'SessionToken',
    'TABLES',
]
