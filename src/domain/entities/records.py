# records.py
# Registros validados: saída do validador, entrada dos repositórios.
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from domain.entities.user_classes import RoleType


class SaleStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    cancelled = "cancelled"


class ProductCategory(str, Enum):
    producto = "Producto"
    servicio = "Servicio"
    consultoria = "Consultoría"
    licencia = "Licencia"
    mantenimiento = "Mantenimiento"
    capacitacion = "Capacitación"
    otro = "Otro"


class StockOperation(str, Enum):
    add = "add"
    subtract = "subtract"
    set = "set"


INDUSTRIES = (
    "Tecnología",
    "Retail",
    "Salud",
    "Educación",
    "Construcción",
    "Manufactura",
    "Servicios Financieros",
    "Alimentos y Bebidas",
    "Turismo",
    "Transporte",
    "Servicios",
    "Hostelería",
    "Otro",
)

# status que entram nos totais de relatórios
BILLABLE_STATUSES = (SaleStatus.paid, SaleStatus.pending)


@dataclass(frozen=True)
class ClientRecord:
    name: str
    email: str | None
    phone: str | None
    industry: str | None
    notes: str


@dataclass(frozen=True)
class SaleRecord:
    client_id: int
    amount: float
    description: str
    date: datetime
    status: SaleStatus


@dataclass(frozen=True)
class UserRecord:
    name: str
    email: str
    password: str | None
    role: RoleType | None


@dataclass(frozen=True)
class ProductRecord:
    name: str
    description: str
    price: float
    category: ProductCategory
    sku: str | None
    stock: int
    is_active: bool


@dataclass(frozen=True)
class StockUpdate:
    quantity: int
    operation: StockOperation
