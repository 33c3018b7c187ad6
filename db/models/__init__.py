from .user import User
from .material import RawMaterial
from .product import Category, Product
from .manufacturing import ManufacturingLog, ManufacturingReversal
from .lead import Lead, LeadRemark
from .b2b import B2B

__all__ = [n for n in dir() if n[:1].isupper()]
