from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Text, ForeignKey, Numeric, JSON,
    PrimaryKeyConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from servivent.config.database import Base

# ===== TABLAS BASE =====

class Branch(Base):
    """Modelo de Sucursal"""
    __tablename__ = "Sucursales"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column("Nombre", String(255), nullable=False)
    direccion = Column("Direccion", Text)
    telefono = Column("Telefono", String(50))

class User(Base):
    """Perfil de usuario; el id proviene del proveedor de identidad"""
    __tablename__ = "Usuarios"

    id = Column(String(36), primary_key=True)
    nombre = Column("Nombre", String(255), nullable=False)
    email = Column("Email", String(255), unique=True, nullable=False)
    avatar_link = Column(Text)
    rol = Column(String(50), default='Empleado', nullable=False)
    id_sucursal = Column("id_Sucursal", Integer, ForeignKey("Sucursales.id"))

class Provider(Base):
    """Modelo de Proveedor"""
    __tablename__ = "Proveedores"

    id = Column(String(36), primary_key=True)
    nombre = Column("Nombre", String(255), nullable=False)
    contacto_nombre = Column(String(255))
    contacto_email = Column(String(255))
    contacto_telefono = Column(String(50))
    direccion = Column(Text)
    logo_url = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

# ===== PRODUCTOS E INVENTARIO =====

class Product(Base):
    """Catálogo maestro de productos"""
    __tablename__ = "Productos"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column("SKU", String(100), unique=True, nullable=False)
    nombre = Column("Nombre", String(255), nullable=False)
    modelo = Column("Modelo", String(255))
    marca = Column("Marca", String(255))
    categoria = Column("Categoria", String(255))
    descripcion = Column("Descripcion", Text)
    precio_base = Column("Precio_base", Numeric(12, 2), default=0)
    imagenes = Column("Imagenes", JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    inventory = relationship("Inventory", back_populates="product")

class Inventory(Base):
    """Existencias y costo promedio ponderado por producto y sucursal"""
    __tablename__ = "Inventario"

    id_producto = Column(Integer, ForeignKey("Productos.id"), nullable=False)
    id_sucursal = Column(Integer, ForeignKey("Sucursales.id"), nullable=False)
    cantidad = Column(Integer, nullable=False, default=0)
    costo_promedio = Column(Numeric(14, 4), nullable=False, default=0)

    __table_args__ = (
        PrimaryKeyConstraint('id_producto', 'id_sucursal', name='inventario_producto_sucursal_pkey'),
        CheckConstraint('cantidad >= 0', name='inventario_cantidad_no_negativa'),
    )

    product = relationship("Product", back_populates="inventory")

class BranchPrice(Base):
    """Precio de venta por sucursal; si no existe se usa el precio base"""
    __tablename__ = "Precios_Sucursal"

    id_producto = Column(Integer, ForeignKey("Productos.id"), nullable=False)
    id_sucursal = Column(Integer, ForeignKey("Sucursales.id"), nullable=False)
    precio_venta = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        PrimaryKeyConstraint('id_producto', 'id_sucursal', name='precios_sucursal_pkey'),
    )

# ===== COMPRAS =====

class Purchase(Base):
    """Modelo de Compra"""
    __tablename__ = "Compras"

    id = Column(Integer, primary_key=True, index=True)
    folio = Column(String(50), index=True)
    id_proveedor = Column(String(36), ForeignKey("Proveedores.id"))
    id_sucursal = Column(Integer, ForeignKey("Sucursales.id"), nullable=False)
    id_usuario = Column(String(36), ForeignKey("Usuarios.id"))
    fecha_compra = Column(DateTime(timezone=True), server_default=func.now())
    monto_total = Column(Numeric(14, 2), nullable=False, default=0)
    estado = Column(String(50), nullable=False, default='Pendiente')
    condicion_pago = Column(String(50), nullable=False, default='Contado')
    fecha_vencimiento = Column(Date)
    tipo_cambio = Column(Numeric(14, 4), default=1)
    estado_pago = Column(String(50), nullable=False, default='Pago Pendiente')

    items = relationship("PurchaseItem", back_populates="purchase")
    payments = relationship("PurchasePayment", back_populates="purchase")

class PurchaseItem(Base):
    """Detalle de Compra"""
    __tablename__ = "Detalles_Compra"

    id = Column(Integer, primary_key=True, index=True)
    id_compra = Column(Integer, ForeignKey("Compras.id"), nullable=False, index=True)
    id_producto = Column(Integer, ForeignKey("Productos.id"), nullable=False)
    cantidad = Column(Integer, nullable=False)
    costo_unitario = Column(Numeric(14, 4), nullable=False)
    moneda = Column(String(10), nullable=False, default='Bs.')

    purchase = relationship("Purchase", back_populates="items")

class PurchasePayment(Base):
    """Pago de Compra"""
    __tablename__ = "Pagos_Compra"

    id = Column(Integer, primary_key=True, index=True)
    id_compra = Column(Integer, ForeignKey("Compras.id"), nullable=False, index=True)
    monto = Column(Numeric(14, 2), nullable=False)
    fecha_pago = Column(Date, nullable=False)
    metodo_pago = Column(String(50), nullable=False)
    notas = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    purchase = relationship("Purchase", back_populates="payments")

# ===== VENTAS =====

class Sale(Base):
    """Modelo de Venta"""
    __tablename__ = "Ventas"

    id = Column(Integer, primary_key=True, index=True)
    id_sucursal = Column(Integer, ForeignKey("Sucursales.id"), nullable=False)
    id_usuario = Column(String(36), ForeignKey("Usuarios.id"), nullable=False)
    fecha_venta = Column(DateTime(timezone=True), server_default=func.now())
    monto_total = Column(Numeric(14, 2), nullable=False)
    metodo_pago = Column(String(50), nullable=False)
    estado = Column(String(50), nullable=False, default='Completada')

    items = relationship("SaleItem", back_populates="sale")

class SaleItem(Base):
    """Detalle de Venta"""
    __tablename__ = "Detalles_Venta"

    id = Column(Integer, primary_key=True, index=True)
    id_venta = Column(Integer, ForeignKey("Ventas.id"), nullable=False, index=True)
    id_producto = Column(Integer, ForeignKey("Productos.id"), nullable=False)
    cantidad = Column(Integer, nullable=False)
    precio_unitario = Column(Numeric(12, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")
