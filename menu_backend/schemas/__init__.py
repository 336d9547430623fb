# Schemas package (re-export feature modules for stable imports)
from .auth.auth import *
from .catalog.catalog import *
from .content.banner import *
from .content.settings import *
from .orders.order import *
from .common.common import *
