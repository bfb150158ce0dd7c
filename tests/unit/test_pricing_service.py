"""
Unit tests for rental/services/pricing_service.py

Tests coverage:
- compute_invoice_amounts(): rental/fuel amounts, cent rounding, exact total
- get_vehicle_pricing(): missing vehicle, missing fuel price, complete data
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from rental.services.pricing_service import (
    ModelPricing,
    VehiclePricing,
    compute_invoice_amounts,
    get_fuel_price,
    get_vehicle_pricing,
)


class TestComputeInvoiceAmounts:

    def test_rental_is_daily_price_times_days(self, vehicle_pricing):
        amounts = compute_invoice_amounts(vehicle_pricing, 4)
        assert amounts.rental == Decimal("180.00")

    def test_fuel_is_litre_price_times_capacity(self, vehicle_pricing):
        amounts = compute_invoice_amounts(vehicle_pricing, 4)
        assert amounts.fuel == Decimal("72.95")

    def test_total_is_exact_sum_of_lines(self, vehicle_pricing):
        amounts = compute_invoice_amounts(vehicle_pricing, 7)
        assert amounts.total == amounts.rental + amounts.fuel
        assert amounts.total == Decimal("387.95")

    def test_fuel_rounded_half_up_to_cents(self):
        pricing = VehiclePricing(
            model=ModelPricing(
                id_modelo=2,
                precio_cada_dia=Decimal("55.00"),
                capacidad_deposito=45,
                tipo_combustible="Gasoil",
            ),
            precio_por_litro=Decimal("1.359"),
        )
        # 1.359 * 45 = 61.155
        amounts = compute_invoice_amounts(pricing, 1)
        assert amounts.fuel == Decimal("61.16")
        assert amounts.total == Decimal("116.16")

    def test_same_inputs_give_same_total(self, vehicle_pricing):
        assert compute_invoice_amounts(vehicle_pricing, 3).total == compute_invoice_amounts(vehicle_pricing, 3).total


class TestGetVehiclePricing:

    @pytest.mark.asyncio
    async def test_unknown_vehicle_returns_none(self, mock_session):
        result = MagicMock()
        result.one_or_none.return_value = None
        mock_session.execute.return_value = result

        assert await get_vehicle_pricing(mock_session, "0000-XXX") is None

    @pytest.mark.asyncio
    async def test_missing_fuel_price_returns_none(self, mock_session, vehicle_pricing):
        with patch("rental.services.pricing_service.get_model_pricing", new=AsyncMock(return_value=vehicle_pricing.model)), \
             patch("rental.services.pricing_service.get_fuel_price", new=AsyncMock(return_value=None)):
            assert await get_vehicle_pricing(mock_session, "1234-ABC") is None

    @pytest.mark.asyncio
    async def test_complete_pricing(self, mock_session, vehicle_pricing):
        with patch("rental.services.pricing_service.get_model_pricing", new=AsyncMock(return_value=vehicle_pricing.model)) as mock_model, \
             patch("rental.services.pricing_service.get_fuel_price", new=AsyncMock(return_value=Decimal("1.459"))) as mock_fuel:
            pricing = await get_vehicle_pricing(mock_session, "1234-ABC", lock_vehicle=True)

        assert pricing == vehicle_pricing
        mock_model.assert_awaited_once_with(mock_session, "1234-ABC", lock_vehicle=True)
        mock_fuel.assert_awaited_once_with(mock_session, "Gasolina")

    @pytest.mark.asyncio
    async def test_model_row_mapped_to_pricing(self, mock_session):
        row = MagicMock(
            id_modelo=3,
            precio_cada_dia=Decimal("60.00"),
            capacidad_deposito=55,
            tipo_combustible="Gasolina",
        )
        model_result = MagicMock()
        model_result.one_or_none.return_value = row
        fuel_result = MagicMock()
        fuel_result.scalar_one_or_none.return_value = Decimal("1.459")
        mock_session.execute.side_effect = [model_result, fuel_result]

        pricing = await get_vehicle_pricing(mock_session, "5678-DEF")

        assert pricing.model.id_modelo == 3
        assert pricing.model.capacidad_deposito == 55
        assert pricing.precio_por_litro == Decimal("1.459")

    @pytest.mark.asyncio
    async def test_unknown_fuel_type(self, mock_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute.return_value = result

        assert await get_fuel_price(mock_session, "Hidrogeno") is None
