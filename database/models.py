"""
SQLAlchemy ORM models for the vehicle rental database.

This module defines the tables:
- clientes: Rental customers identified by national ID (NIF)
- modelos: Vehicle models with daily price and fuel tank data
- precio_combustible: Price per litre for each fuel type
- vehiculos: Fleet vehicles identified by licence plate
- reservas: Vehicle reservations (nullable end date = default duration)
- facturas / lineas_factura: Invoices generated for each reservation
- secuencias: Transactional counters for reservation and invoice numbers

Table and column names follow the rental operation's existing schema.
Monetary columns are NUMERIC and mapped to Decimal.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    DATE,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# ============================================================================
# Base Class
# ============================================================================


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# ============================================================================
# Reference Data
# ============================================================================


class Client(Base):
    """Client model - Only its existence matters to the booking engine."""

    __tablename__ = "clientes"

    nif: Mapped[str] = mapped_column(String(9), primary_key=True)
    nombre: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ape1: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ape2: Mapped[str | None] = mapped_column(String(50), nullable=True)
    direccion: Mapped[str | None] = mapped_column(String(100), nullable=True)
    cp: Mapped[str | None] = mapped_column(String(5), nullable=True)
    ciudad: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Client(nif='{self.nif}')>"


class FuelPrice(Base):
    """Price per litre for a fuel type (read-only for the engine)."""

    __tablename__ = "precio_combustible"

    tipo_combustible: Mapped[str] = mapped_column(String(10), primary_key=True)
    precio_por_litro: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)

    __table_args__ = (
        CheckConstraint("precio_por_litro >= 0", name="check_fuel_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<FuelPrice(tipo_combustible='{self.tipo_combustible}', precio_por_litro={self.precio_por_litro})>"


class VehicleModel(Base):
    """
    Vehicle model - Pricing data shared by every vehicle of the model.

    The daily price drives the rental line of the invoice; the tank capacity
    and fuel type drive the full-tank fuel line.
    """

    __tablename__ = "modelos"

    id_modelo: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    nombre: Mapped[str | None] = mapped_column(String(30), nullable=True)
    precio_cada_dia: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    capacidad_deposito: Mapped[int] = mapped_column(Integer, nullable=False)
    tipo_combustible: Mapped[str] = mapped_column(
        String(10),
        ForeignKey("precio_combustible.tipo_combustible"),
        nullable=False,
    )

    vehicles: Mapped[list["Vehicle"]] = relationship("Vehicle", back_populates="model")

    __table_args__ = (
        CheckConstraint("precio_cada_dia >= 0", name="check_model_daily_price_non_negative"),
        CheckConstraint("capacidad_deposito > 0", name="check_model_tank_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<VehicleModel(id_modelo={self.id_modelo}, precio_cada_dia={self.precio_cada_dia})>"


class Vehicle(Base):
    """Fleet vehicle, identified by licence plate."""

    __tablename__ = "vehiculos"

    matricula: Mapped[str] = mapped_column(String(8), primary_key=True)
    id_modelo: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("modelos.id_modelo"),
        nullable=False,
        index=True,
    )
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)

    model: Mapped["VehicleModel"] = relationship("VehicleModel", back_populates="vehicles")

    def __repr__(self) -> str:
        return f"<Vehicle(matricula='{self.matricula}', id_modelo={self.id_modelo})>"


# ============================================================================
# Transactional Models
# ============================================================================


class Reservation(Base):
    """
    Reservation model - One vehicle booked by one client.

    fecha_fin is NULL when the client did not give an end date; such a
    reservation lasts DEFAULT_RENTAL_DAYS for pricing and availability.
    """

    __tablename__ = "reservas"

    id_reserva: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    cliente: Mapped[str] = mapped_column(
        String(9),
        ForeignKey("clientes.nif"),
        nullable=False,
        index=True,
    )
    matricula: Mapped[str] = mapped_column(
        String(8),
        ForeignKey("vehiculos.matricula"),
        nullable=False,
    )
    fecha_ini: Mapped[date] = mapped_column(DATE, nullable=False)
    fecha_fin: Mapped[date | None] = mapped_column(DATE, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "fecha_fin IS NULL OR fecha_fin > fecha_ini",
            name="check_reservation_dates_ordered",
        ),
        # Availability checks always filter by vehicle and start date
        Index("idx_reservas_matricula_fecha_ini", "matricula", "fecha_ini"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id_reserva={self.id_reserva}, matricula='{self.matricula}', "
            f"fecha_ini={self.fecha_ini}, fecha_fin={self.fecha_fin})>"
        )


class Invoice(Base):
    """Invoice generated alongside a reservation."""

    __tablename__ = "facturas"

    nro_factura: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    cliente: Mapped[str] = mapped_column(
        String(9),
        ForeignKey("clientes.nif"),
        nullable=False,
        index=True,
    )
    importe: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    lines: Mapped[list["InvoiceLine"]] = relationship("InvoiceLine", back_populates="invoice")

    def __repr__(self) -> str:
        return f"<Invoice(nro_factura={self.nro_factura}, cliente='{self.cliente}', importe={self.importe})>"


class InvoiceLine(Base):
    """Invoice line - Exactly two per invoice (rental and fuel)."""

    __tablename__ = "lineas_factura"

    nro_factura: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("facturas.nro_factura"),
        primary_key=True,
    )
    concepto: Mapped[str] = mapped_column(String(60), primary_key=True)
    importe: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="lines")

    def __repr__(self) -> str:
        return f"<InvoiceLine(nro_factura={self.nro_factura}, concepto='{self.concepto}', importe={self.importe})>"


class SequenceCounter(Base):
    """
    Named counter used to allocate reservation IDs and invoice numbers.

    Incremented inside the booking transaction, so an allocation is rolled
    back together with the rows that used it.
    """

    __tablename__ = "secuencias"

    nombre: Mapped[str] = mapped_column(String(30), primary_key=True)
    valor: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<SequenceCounter(nombre='{self.nombre}', valor={self.valor})>"
